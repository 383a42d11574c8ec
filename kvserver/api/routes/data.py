from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from kvserver.api import deps
from kvserver.api.responses import BAD_REQUEST, METHOD_NOT_ALLOWED, NOT_FOUND
from kvserver.schemas.data import DataPayload
from kvserver.services.audit import audit_log
from kvserver.services.store import InvalidKeyError, KeyNotFoundError, Store

router = APIRouter(tags=["data"])


@router.post(
    "/data",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={**BAD_REQUEST, **METHOD_NOT_ALLOWED},
)
def put_data(
    payload: DataPayload,
    request: Request,
    store: Store = Depends(deps.get_store),
):
    entries = payload.root
    store.put_all(entries)
    audit_log("data_put", deps.client_host(request), keys=sorted(entries))
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/data", response_model=dict[str, str], responses=METHOD_NOT_ALLOWED)
def get_data(store: Store = Depends(deps.get_store)):
    return store.get_all()


# The path converter also matches an empty tail, so DELETE /data/ lands here
# and is rejected by the store as an invalid key.
@router.delete(
    "/data/{key:path}",
    response_class=Response,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def delete_data(
    key: str,
    request: Request,
    store: Store = Depends(deps.get_store),
):
    try:
        store.delete(key)
    except InvalidKeyError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except KeyNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    audit_log("data_delete", deps.client_host(request), key=key)
    return Response(status_code=status.HTTP_200_OK)
