from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from chamber import schemas
from chamber.api import deps
from chamber.models.news import News
from chamber.services.realtime import Broadcaster

router = APIRouter()

PUBLIC_CACHE_CONTROL = "public, max-age=300"
PUBLIC_LIMIT = 10


def _newest_first(query):
    return query.order_by(News.published_at.desc(), News.created_at.desc(), News.id.desc())


@router.get("", response_model=List[schemas.News])
def read_news(response: Response, db: Session = Depends(deps.get_db)) -> Any:
    """The 10 most recently published active articles."""
    response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    return _newest_first(db.query(News).filter(News.is_active.is_(True))).limit(PUBLIC_LIMIT).all()


@router.get("/admin", response_model=List[schemas.News])
def read_all_news(
    db: Session = Depends(deps.get_db),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    return _newest_first(db.query(News)).all()


@router.post("", response_model=schemas.News, status_code=201)
def create_news(
    *,
    db: Session = Depends(deps.get_db),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    claims: schemas.TokenClaims = Depends(deps.require_admin),
    news_in: schemas.NewsCreate,
) -> Any:
    news = News(
        **news_in.model_dump(),
        author=claims.name or "Admin",
    )
    db.add(news)
    db.commit()
    db.refresh(news)

    broadcaster.publish("news-created", schemas.to_event(schemas.News, news))
    return news


@router.put("/{id}", response_model=schemas.News)
def update_news(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
    news_in: schemas.NewsUpdate,
) -> Any:
    news = db.query(News).filter(News.id == id).first()
    if not news:
        raise HTTPException(status_code=404, detail="News article not found")

    for field, value in news_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(news, field, value)
    db.commit()
    db.refresh(news)

    broadcaster.publish("news-updated", schemas.to_event(schemas.News, news))
    return news


@router.delete("/{id}", response_model=schemas.Message)
def delete_news(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    news = db.query(News).filter(News.id == id).first()
    if not news:
        raise HTTPException(status_code=404, detail="News article not found")
    db.delete(news)
    db.commit()

    broadcaster.publish("news-deleted", {"id": id})
    return {"message": "News article deleted successfully"}
