"""
HTTP routes for the school CMS API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from school_cms import resources
from school_cms.db import DbClient
from school_cms.dependencies import (
    get_db_client,
    get_token_service,
    repository_for,
    require_admin,
    require_admin_if_protected,
)
from school_cms.errors import BadRequestError, CmsError, InvalidCredentialsError
from school_cms.resources import ResourceRepository, UploadedMedia
from school_cms.schemas import (
    AlumniResponse,
    ContactCreate,
    ContactResponse,
    ExtracurricularResponse,
    GaleriResponse,
    HeadmasterMessageResponse,
    HeroResponse,
    KalenderResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    NewsResponse,
    SaranaResponse,
    SejarahResponse,
    VisiMisiResponse,
    VisiMisiUpdate,
    parse_timestamp,
)
from school_cms.security import TokenService, login

logger = logging.getLogger(__name__)

# Mounted at the root: login lives outside the API prefix.
admin_router = APIRouter()
router = APIRouter()

_protected = [Depends(require_admin_if_protected)]


def _media(upload: Optional[UploadFile]) -> Optional[UploadedMedia]:
    if upload is None or not upload.filename:
        return None
    return UploadedMedia(
        data=upload.file.read(),
        filename=upload.filename,
        content_type=upload.content_type,
    )


def _timestamp(value: Optional[str], field: str):
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise BadRequestError(f"Invalid {field}", details=str(exc)) from exc


# ---------------------------------------------------------------- admin


@admin_router.post("/admin/login", response_model=LoginResponse)
def admin_login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        token = login(db, tokens, payload.username, payload.password)
    except InvalidCredentialsError:
        raise
    except Exception as exc:
        logger.exception("Login failed for %r", payload.username)
        raise CmsError("An error occurred during login") from exc
    return LoginResponse(token=token)


@router.get("/admin/secure-data", response_model=MessageResponse)
def secure_data(claims: dict = Depends(require_admin)):
    return MessageResponse(message="This is secured data for admin")


# ---------------------------------------------------------------- news

news_repo = repository_for(resources.NEWS)


@router.get("/news", response_model=list[NewsResponse])
def list_news(repo: ResourceRepository = Depends(news_repo)):
    return repo.list_all()


@router.get("/news/{item_id}", response_model=NewsResponse)
def get_news(item_id: int, repo: ResourceRepository = Depends(news_repo)):
    return repo.get(item_id)


@router.post("/news", response_model=NewsResponse, dependencies=_protected)
def create_news(
    title: str = Form(...),
    description: str = Form(...),
    published_at: str = Form(..., alias="publishedAt"),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(news_repo),
):
    values = {
        "title": title,
        "description": description,
        "published_at": _timestamp(published_at, "publishedAt"),
    }
    return repo.create(values, _media(image))


@router.put("/news/{item_id}", response_model=NewsResponse, dependencies=_protected)
def update_news(
    item_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    published_at: Optional[str] = Form(None, alias="publishedAt"),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(news_repo),
):
    values = {
        "title": title,
        "description": description,
        "published_at": _timestamp(published_at, "publishedAt"),
    }
    return repo.update(item_id, values, _media(image))


@router.delete("/news/{item_id}", status_code=204, dependencies=_protected)
def delete_news(item_id: int, repo: ResourceRepository = Depends(news_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- hero

hero_repo = repository_for(resources.HERO)


@router.get("/hero", response_model=Optional[HeroResponse])
def get_hero(repo: ResourceRepository = Depends(hero_repo)):
    return repo.first()


@router.put("/hero/{item_id}", response_model=HeroResponse, dependencies=_protected)
def update_hero(
    item_id: int,
    welcome_message: Optional[str] = Form(None, alias="welcomeMessage"),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(hero_repo),
):
    values = {"welcome_message": welcome_message, "description": description}
    return repo.update(item_id, values, _media(image))


# ---------------------------------------------------------------- extracurriculars

extracurricular_repo = repository_for(resources.EXTRACURRICULAR)


@router.get("/extracurriculars", response_model=list[ExtracurricularResponse])
def list_extracurriculars(repo: ResourceRepository = Depends(extracurricular_repo)):
    return repo.list_all()


@router.get("/extracurriculars/{item_id}", response_model=ExtracurricularResponse)
def get_extracurricular(
    item_id: int, repo: ResourceRepository = Depends(extracurricular_repo)
):
    return repo.get(item_id)


@router.post(
    "/extracurriculars", response_model=ExtracurricularResponse, dependencies=_protected
)
def create_extracurricular(
    name: str = Form(...),
    description: str = Form(...),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(extracurricular_repo),
):
    return repo.create({"name": name, "description": description}, _media(image))


@router.put(
    "/extracurriculars/{item_id}",
    response_model=ExtracurricularResponse,
    dependencies=_protected,
)
def update_extracurricular(
    item_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(extracurricular_repo),
):
    values = {"name": name, "description": description}
    return repo.update(item_id, values, _media(image))


@router.delete("/extracurriculars/{item_id}", status_code=204, dependencies=_protected)
def delete_extracurricular(
    item_id: int, repo: ResourceRepository = Depends(extracurricular_repo)
):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- kalender

kalender_repo = repository_for(resources.KALENDER)


@router.get("/kalender", response_model=list[KalenderResponse])
def list_kalender(repo: ResourceRepository = Depends(kalender_repo)):
    return repo.list_all()


@router.get("/kalender/{item_id}", response_model=KalenderResponse)
def get_kalender(item_id: int, repo: ResourceRepository = Depends(kalender_repo)):
    return repo.get(item_id)


@router.post("/kalender", response_model=KalenderResponse, dependencies=_protected)
def create_kalender(
    title: str = Form(...),
    file: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(kalender_repo),
):
    return repo.create({"title": title}, _media(file))


@router.put(
    "/kalender/{item_id}", response_model=KalenderResponse, dependencies=_protected
)
def update_kalender(
    item_id: int,
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(kalender_repo),
):
    return repo.update(item_id, {"title": title}, _media(file))


@router.delete("/kalender/{item_id}", status_code=204, dependencies=_protected)
def delete_kalender(item_id: int, repo: ResourceRepository = Depends(kalender_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- alumni

alumni_repo = repository_for(resources.ALUMNI)


@router.get("/alumni", response_model=list[AlumniResponse])
def list_alumni(repo: ResourceRepository = Depends(alumni_repo)):
    return repo.list_all()


@router.get("/alumni/{item_id}", response_model=AlumniResponse)
def get_alumni(item_id: int, repo: ResourceRepository = Depends(alumni_repo)):
    return repo.get(item_id)


@router.post("/alumni", response_model=AlumniResponse, dependencies=_protected)
def create_alumni(
    title: str = Form(...),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(alumni_repo),
):
    return repo.create({"title": title}, _media(image))


@router.put("/alumni/{item_id}", response_model=AlumniResponse, dependencies=_protected)
def update_alumni(
    item_id: int,
    title: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(alumni_repo),
):
    return repo.update(item_id, {"title": title}, _media(image))


@router.delete("/alumni/{item_id}", status_code=204, dependencies=_protected)
def delete_alumni(item_id: int, repo: ResourceRepository = Depends(alumni_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- galeri

galeri_repo = repository_for(resources.GALERI)


@router.get("/galeri", response_model=list[GaleriResponse])
def list_galeri(repo: ResourceRepository = Depends(galeri_repo)):
    return repo.list_all()


@router.get("/galeri/{item_id}", response_model=GaleriResponse)
def get_galeri(item_id: int, repo: ResourceRepository = Depends(galeri_repo)):
    return repo.get(item_id)


@router.post("/galeri", response_model=GaleriResponse, dependencies=_protected)
def create_galeri(
    title: str = Form(...),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(galeri_repo),
):
    return repo.create({"title": title}, _media(image))


@router.put("/galeri/{item_id}", response_model=GaleriResponse, dependencies=_protected)
def update_galeri(
    item_id: int,
    title: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(galeri_repo),
):
    return repo.update(item_id, {"title": title}, _media(image))


@router.delete("/galeri/{item_id}", status_code=204, dependencies=_protected)
def delete_galeri(item_id: int, repo: ResourceRepository = Depends(galeri_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- sarana

sarana_repo = repository_for(resources.SARANA)


@router.get("/sarana", response_model=list[SaranaResponse])
def list_sarana(repo: ResourceRepository = Depends(sarana_repo)):
    return repo.list_all()


@router.get("/sarana/{item_id}", response_model=SaranaResponse)
def get_sarana(item_id: int, repo: ResourceRepository = Depends(sarana_repo)):
    return repo.get(item_id)


@router.post("/sarana", response_model=SaranaResponse, dependencies=_protected)
def create_sarana(
    name: str = Form(...),
    description: str = Form(...),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(sarana_repo),
):
    return repo.create({"name": name, "description": description}, _media(image))


@router.put("/sarana/{item_id}", response_model=SaranaResponse, dependencies=_protected)
def update_sarana(
    item_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(sarana_repo),
):
    values = {"name": name, "description": description}
    return repo.update(item_id, values, _media(image))


@router.delete("/sarana/{item_id}", status_code=204, dependencies=_protected)
def delete_sarana(item_id: int, repo: ResourceRepository = Depends(sarana_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- headmaster message

headmaster_repo = repository_for(resources.HEADMASTER_MESSAGE)


@router.get(
    "/headmaster-message", response_model=Optional[HeadmasterMessageResponse]
)
def get_headmaster_message(repo: ResourceRepository = Depends(headmaster_repo)):
    return repo.first()


@router.put(
    "/headmaster-message/{item_id}",
    response_model=HeadmasterMessageResponse,
    dependencies=_protected,
)
def update_headmaster_message(
    item_id: int,
    message: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    headmaster_name: Optional[str] = Form(None, alias="headmasterName"),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(headmaster_repo),
):
    values = {
        "message": message,
        "description": description,
        "headmaster_name": headmaster_name,
    }
    return repo.update(item_id, values, _media(image))


# ---------------------------------------------------------------- sejarah

sejarah_repo = repository_for(resources.SEJARAH)


@router.get("/sejarah", response_model=list[SejarahResponse])
def list_sejarah(repo: ResourceRepository = Depends(sejarah_repo)):
    return repo.list_all()


@router.get("/sejarah/{item_id}", response_model=SejarahResponse)
def get_sejarah(item_id: int, repo: ResourceRepository = Depends(sejarah_repo)):
    return repo.get(item_id)


@router.post("/sejarah", response_model=SejarahResponse, dependencies=_protected)
def create_sejarah(
    period: str = Form(...),
    text: str = Form(...),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(sejarah_repo),
):
    return repo.create({"period": period, "text": text}, _media(image))


@router.put(
    "/sejarah/{item_id}", response_model=SejarahResponse, dependencies=_protected
)
def update_sejarah(
    item_id: int,
    period: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: ResourceRepository = Depends(sejarah_repo),
):
    return repo.update(item_id, {"period": period, "text": text}, _media(image))


@router.delete("/sejarah/{item_id}", status_code=204, dependencies=_protected)
def delete_sejarah(item_id: int, repo: ResourceRepository = Depends(sejarah_repo)):
    repo.delete(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------- visi misi

visi_misi_repo = repository_for(resources.VISI_MISI)


@router.get("/visi-misi", response_model=Optional[VisiMisiResponse])
def get_visi_misi(repo: ResourceRepository = Depends(visi_misi_repo)):
    return repo.first()


@router.put(
    "/visi-misi/{item_id}", response_model=VisiMisiResponse, dependencies=_protected
)
def update_visi_misi(
    item_id: int,
    payload: VisiMisiUpdate,
    repo: ResourceRepository = Depends(visi_misi_repo),
):
    return repo.update(item_id, payload.model_dump(exclude_none=True))


# ---------------------------------------------------------------- contacts

contact_repo = repository_for(resources.CONTACT)


@router.post("/contacts", response_model=ContactResponse, status_code=201)
def create_contact(
    payload: ContactCreate, repo: ResourceRepository = Depends(contact_repo)
):
    return repo.create(payload.model_dump())


@router.get("/contacts", response_model=list[ContactResponse], dependencies=_protected)
def list_contacts(repo: ResourceRepository = Depends(contact_repo)):
    return repo.list_all()


@router.delete(
    "/contacts/{item_id}", response_model=ContactResponse, dependencies=_protected
)
def delete_contact(item_id: int, repo: ResourceRepository = Depends(contact_repo)):
    return repo.delete(item_id)
