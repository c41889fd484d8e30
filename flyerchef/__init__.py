"""Turn supermarket flyers into budget recipes with a multimodal model."""

from .analysis import FlyerAnalyzer, analyze_flyer, create_analyzer
from .config import AnalysisConfig, FlyerChefConfig, PreferencesConfig, load_config
from .errors import AnalysisError, FlyerChefError, ValidationError
from .models import (
    AnalysisResult,
    CuisineType,
    FlyerAnalysis,
    FlyerSubmission,
    Ingredient,
    NotAFlyer,
    Preferences,
    Recipe,
)
from .request import AnalysisRequest, build_request, parse_budget, resolve_cuisine
from .session import Event, FlyerChefSession, InvalidTransition, Step, transition

__all__ = [
    "FlyerAnalyzer",
    "analyze_flyer",
    "create_analyzer",
    "FlyerChefConfig",
    "AnalysisConfig",
    "PreferencesConfig",
    "load_config",
    "FlyerChefError",
    "ValidationError",
    "AnalysisError",
    "CuisineType",
    "Preferences",
    "FlyerSubmission",
    "Ingredient",
    "Recipe",
    "AnalysisResult",
    "FlyerAnalysis",
    "NotAFlyer",
    "AnalysisRequest",
    "build_request",
    "parse_budget",
    "resolve_cuisine",
    "FlyerChefSession",
    "Step",
    "Event",
    "InvalidTransition",
    "transition",
]
