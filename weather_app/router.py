"""API routers for the two resources of the app."""
from typing import List

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse

from weather_app.models import WeatherForecast


def create_api_router(forecast_controller) -> APIRouter:
    """Create the API service router.

    Args:
        forecast_controller: Forecast controller instance

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    @router.get("/", response_class=PlainTextResponse)
    async def read_root():
        """Plain text banner pointing at the forecast endpoint."""
        return forecast_controller.get_root_message()

    @router.get("/weatherforecast", response_model=List[WeatherForecast])
    async def weather_forecast():
        """Sample forecasts for the coming days.

        Returns:
            JSON array of forecast records
        """
        return forecast_controller.get_forecasts()

    return router


def create_web_router(weather_controller) -> APIRouter:
    """Create the web front end router.

    Args:
        weather_controller: Weather controller instance

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    @router.get("/", response_class=HTMLResponse)
    async def read_root():
        """Serve the home page."""
        return weather_controller.get_home()

    @router.get("/weather", response_class=HTMLResponse)
    async def weather():
        """Serve the forecast page."""
        return await weather_controller.get_weather()

    return router
