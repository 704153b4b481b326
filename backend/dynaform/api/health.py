from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from dynaform.db.database import get_db, ping
from dynaform.core.config import settings, logger

router = APIRouter()


@router.get('/health')
async def health_check():
    return {"status": "ok", "service": settings.APP_NAME}


@router.get('/healthz')
def healthz():
    return {"status": "ok"}


@router.get('/readyz')
async def readyz(db: AsyncSession = Depends(get_db)):
    try:
        await ping(db)
    except Exception:
        logger.exception('Readiness DB check failed')
        raise HTTPException(status_code=503, detail='Not ready')

    return {"status": "ready"}
