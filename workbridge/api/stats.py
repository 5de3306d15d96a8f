from fastapi import APIRouter, Depends
from workbridge.auth import CallerContext, get_current_caller
from workbridge.api.deps import get_board
from workbridge.services.board import JobBoard

router = APIRouter()


@router.get("")
async def get_stats(
    board: JobBoard = Depends(get_board),
    caller: CallerContext = Depends(get_current_caller),
):
    return await board.stats(caller)
