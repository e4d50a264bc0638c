from fastapi import APIRouter

router = APIRouter(
    prefix="",
    tags=["Root"],
)

@router.get("/")
async def root() -> dict:
    return {"status": "Campus Issues API Running"}
