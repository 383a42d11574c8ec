from fastapi import Request

from kvserver.services.shutdown import ShutdownSignal
from kvserver.services.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_shutdown_signal(request: Request) -> ShutdownSignal:
    return request.app.state.shutdown


def client_host(request: Request) -> str | None:
    return request.client.host if request.client else None
