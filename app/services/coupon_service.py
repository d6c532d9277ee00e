import logging
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
from fastapi import HTTPException
from app.models.coupon import Coupon, DiscountType
from app.schemas.common import ActionResult
from app.schemas.coupon import CouponCreate, CouponUpdate
from app.services.coupon_validator import canonical_code, validate_coupon

logger = logging.getLogger(__name__)


class CouponService:
    """Service class for coupon administration, validation and redemption"""

    @staticmethod
    def create_coupon(db: Session, coupon_data: CouponCreate) -> Coupon:
        if CouponService.get_coupon_by_code(db, coupon_data.code) is not None:
            raise HTTPException(status_code=409, detail="Coupon code already exists")
        db_coupon = Coupon(
            code=coupon_data.code,
            discount_type=coupon_data.discount_type,
            discount_value=coupon_data.discount_value,
            min_order_value=coupon_data.min_order_value,
            max_uses=coupon_data.max_uses,
            current_uses=0,
            expires_at=coupon_data.expires_at,
        )
        db.add(db_coupon)
        db.commit()
        db.refresh(db_coupon)
        logger.info("Created coupon %s", db_coupon.code)
        return db_coupon

    @staticmethod
    def get_coupon(db: Session, coupon_id: int) -> Optional[Coupon]:
        return db.query(Coupon).filter(Coupon.id == coupon_id).first()

    @staticmethod
    def get_coupon_by_code(db: Session, code: str) -> Optional[Coupon]:
        return db.query(Coupon).filter(Coupon.code == canonical_code(code)).first()

    @staticmethod
    def get_coupons(db: Session, skip: int = 0, limit: int = 100) -> List[Coupon]:
        limit = min(max(limit, 1), 500)
        return db.query(Coupon).order_by(Coupon.id).offset(skip).limit(limit).all()

    @staticmethod
    def update_coupon(db: Session, coupon_id: int, coupon_data: CouponUpdate) -> Optional[Coupon]:
        db_coupon = db.query(Coupon).filter(Coupon.id == coupon_id).first()
        if not db_coupon:
            return None

        # Compute final fields then validate
        final_type = coupon_data.discount_type if coupon_data.discount_type is not None else db_coupon.discount_type
        final_value = coupon_data.discount_value if coupon_data.discount_value is not None else db_coupon.discount_value
        if final_type == DiscountType.PERCENTAGE and final_value > 100:
            raise HTTPException(status_code=400, detail="percentage discount_value must be between 0 and 100")

        db_coupon.discount_type = final_type
        db_coupon.discount_value = final_value
        if coupon_data.min_order_value is not None:
            db_coupon.min_order_value = coupon_data.min_order_value
        if coupon_data.max_uses is not None:
            db_coupon.max_uses = coupon_data.max_uses
        if coupon_data.expires_at is not None:
            db_coupon.expires_at = coupon_data.expires_at

        db.commit()
        db.refresh(db_coupon)
        return db_coupon

    @staticmethod
    def delete_coupon(db: Session, coupon_id: int) -> bool:
        db_coupon = db.query(Coupon).filter(Coupon.id == coupon_id).first()
        if not db_coupon:
            return False
        # Orders keep the code string; nothing else references the row
        db.delete(db_coupon)
        db.commit()
        return True

    @staticmethod
    def validate_coupon(db: Session, code: Optional[str], order_subtotal: int) -> ActionResult:
        return validate_coupon(
            code,
            order_subtotal,
            lambda c: db.query(Coupon).filter(Coupon.code == c).first(),
        )

    @staticmethod
    def increment_coupon_usage(db: Session, code: str, commit: bool = True) -> bool:
        """Count one redemption of `code`.

        The increment is a single conditional UPDATE guarded by
        `current_uses < max_uses`, so two redemptions racing for the last use
        cannot both succeed. Returns False when the coupon is unknown or already
        exhausted; neither case raises. With `commit=False` the caller owns the
        transaction and database errors propagate to it.
        """
        code = canonical_code(code)
        stmt = (
            update(Coupon)
            .where(Coupon.code == code, Coupon.current_uses < Coupon.max_uses)
            .values(current_uses=Coupon.current_uses + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            result = db.execute(stmt)
            if result.rowcount == 0:
                if db.query(Coupon.id).filter(Coupon.code == code).first() is None:
                    logger.warning("Coupon %s not found while recording usage", code)
                else:
                    logger.warning("Coupon %s reached its usage limit before redemption was recorded", code)
                if commit:
                    db.rollback()
                return False
            if commit:
                db.commit()
            return True
        except SQLAlchemyError:
            if not commit:
                raise
            db.rollback()
            logger.exception("Error incrementing usage for coupon %s", code)
            return False
