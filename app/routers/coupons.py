from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.coupon import (
    CouponCreate, CouponUpdate, CouponResponse, CouponValidateRequest, CouponValidateResponse
)
from app.security import require_admin
from app.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"])


@router.post("", response_model=CouponResponse, status_code=201, dependencies=[Depends(require_admin)])
def create_coupon(coupon: CouponCreate, db: Session = Depends(get_db)):
    return CouponService.create_coupon(db, coupon)


@router.get("", response_model=List[CouponResponse], dependencies=[Depends(require_admin)])
def list_coupons(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return CouponService.get_coupons(db, skip, limit)


@router.post("/validate", response_model=CouponValidateResponse)
def validate_coupon(body: CouponValidateRequest, db: Session = Depends(get_db)):
    result = CouponService.validate_coupon(db, body.code, body.order_subtotal)
    if not result.success:
        return CouponValidateResponse(valid=False, message=result.message, error=result.error.value)
    return CouponValidateResponse(
        valid=True,
        message=result.message,
        coupon=CouponResponse.model_validate(result.data),
    )


@router.get("/{coupon_id}", response_model=CouponResponse, dependencies=[Depends(require_admin)])
def get_coupon(coupon_id: int, db: Session = Depends(get_db)):
    c = CouponService.get_coupon(db, coupon_id)
    if not c:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return c


@router.put("/{coupon_id}", response_model=CouponResponse, dependencies=[Depends(require_admin)])
def update_coupon(coupon_id: int, payload: CouponUpdate, db: Session = Depends(get_db)):
    updated = CouponService.update_coupon(db, coupon_id, payload)
    if not updated:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return updated


@router.delete("/{coupon_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    ok = CouponService.delete_coupon(db, coupon_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return
