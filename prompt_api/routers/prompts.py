from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from prompt_api.errors import ConfigurationError
from prompt_api.schemas.prompts import PromptIn
from prompt_api.services.prompts import CreatedWithWarning, PromptService

router = APIRouter(prefix="/prompts", tags=["prompts"])


def get_service(request: Request) -> PromptService:
    store = getattr(request.app.state, "store", None)
    if store is None:
        # credenziali mancanti: errore ad ogni richiesta, non all'avvio
        err = getattr(request.app.state, "store_error", None)
        raise ConfigurationError(err.message if err else None)
    return PromptService(store)


@router.get("")
async def list_prompts(svc: PromptService = Depends(get_service)):
    data = await svc.list()
    return JSONResponse(jsonable_encoder(data or []))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_prompt(
    payload: Optional[PromptIn] = None,
    svc: PromptService = Depends(get_service),
):
    result = await svc.create(payload)
    body = dict(result.record)
    if isinstance(result, CreatedWithWarning):
        body["warning"] = result.detail
    return JSONResponse(jsonable_encoder(body), status_code=status.HTTP_201_CREATED)


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    payload: Optional[PromptIn] = None,
    svc: PromptService = Depends(get_service),
):
    record = await svc.update(prompt_id, payload)
    return JSONResponse(jsonable_encoder(record))


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(prompt_id: str, svc: PromptService = Depends(get_service)):
    await svc.delete(prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
