"""
FastAPI router: POST /api/gasless, GET /api/gasless/fee-payer.

Handlers are sync: FastAPI runs them in its threadpool, where the blocking
RPC calls of the pipeline are acceptable. Errors are raised as GaslessError
and rendered by the handlers registered in server.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from backend_gasless.relay.models import FeePayerResponse, GaslessTransferResponse, TransferRequest
from backend_gasless.relay.service import GaslessTransferService

router = APIRouter(prefix="/gasless", tags=["gasless"])


def get_gasless_service(request: Request) -> GaslessTransferService:
    """Dependency: the service created in the app lifespan."""
    return request.app.state.gasless_service


@router.post("", response_model=GaslessTransferResponse)
def create_gasless_transfer(
    body: TransferRequest,
    service: GaslessTransferService = Depends(get_gasless_service),
) -> GaslessTransferResponse:
    """
    Build a SOL or SPL transfer with the sponsor as fee payer, partially
    signed by the sponsor. The client adds the sender signature and broadcasts.
    """
    return service.build_gasless_transfer(body).to_response()


@router.get("/fee-payer", response_model=FeePayerResponse)
def get_fee_payer(service: GaslessTransferService = Depends(get_gasless_service)) -> FeePayerResponse:
    """Sponsor public key, so clients can show who pays fees."""
    return FeePayerResponse(fee_payer=str(service.require_fee_payer().pubkey))
