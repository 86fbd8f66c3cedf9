"""饮品 API"""

from fastapi import APIRouter, Depends

from core.validators import parse_id_param
from infrastructure.exceptions import DrinkNotFoundError, UnprocessableEntityError
from services import DrinkService
from .deps import get_drink_service

router = APIRouter(prefix="/api/v1/drinks", tags=["drinks"])


@router.get("")
def list_drinks(drink_service: DrinkService = Depends(get_drink_service)):
    """获取全部饮品"""
    drinks = drink_service.get_all_drinks()
    return {
        "data": [drink.to_dict() for drink in drinks],
        "count": len(drinks),
    }


@router.get("/{drink_id}")
def get_drink(drink_id: str, drink_service: DrinkService = Depends(get_drink_service)):
    """获取单个饮品"""
    parsed_id = parse_id_param(drink_id)
    if parsed_id is None:
        raise UnprocessableEntityError("Invalid ID provided")

    drink = drink_service.get_drink_by_id(parsed_id)
    if drink is None:
        raise DrinkNotFoundError(parsed_id)

    return {"data": drink.to_dict()}
