from fastapi import APIRouter
import logging

from config import settings
from models.record import ThemeModel
from utils import theme_state

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/theme",
    tags=["theme"]
)


@router.get("/", response_model=ThemeModel)
async def get_theme():
    return {"theme": theme_state.get_theme(settings.DEFAULT_THEME)}


@router.put("/", response_model=ThemeModel)
async def put_theme(body: ThemeModel):
    theme = theme_state.set_theme(body.theme)
    logger.info(f"Theme set to {theme}")
    return {"theme": theme}


@router.post("/toggle", response_model=ThemeModel)
async def toggle_theme():
    theme = theme_state.toggle_theme(settings.DEFAULT_THEME)
    logger.info(f"Theme toggled to {theme}")
    return {"theme": theme}
