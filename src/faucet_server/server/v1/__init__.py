from fastapi import APIRouter

from .auth import router as auth_router
from .faucet import router as faucet_router
from .status import router as status_router


router = APIRouter(prefix="/v1")
router.include_router(auth_router)
router.include_router(faucet_router)
router.include_router(status_router)
