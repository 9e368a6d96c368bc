from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from campshare.routers.deps import require_active_user
from campshare.routers.schemas import SendSmsRequest

router = APIRouter(prefix="/api", tags=["sms"], dependencies=[Depends(require_active_user)])


@router.post("/send-sms")
def send_sms(payload: SendSmsRequest, request: Request):
    if not payload.phone_number or not payload.message:
        return JSONResponse({"success": False, "error": "Phone number and message are required"}, status_code=400)
    sender = request.app.state.sms_sender
    result = sender.send(payload.phone_number, payload.message, account_sid=payload.sid)
    if not result.success:
        return JSONResponse({"success": False, "error": result.error}, status_code=500)
    return {"success": True}
