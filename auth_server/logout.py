"""
GET /logout (extended variant only). There is no session to clear; always reports success.
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/logout", response_class=PlainTextResponse)
def logout():
    return PlainTextResponse("Logged out successfully")
