"""Weather controller for the web front end."""
from html import escape
from typing import List

from fastapi.responses import HTMLResponse

from weather_app.models import WeatherForecast
from weather_app.services.weather_api_client import WeatherApiError
from weather_app.utils.colored_logger import get_component_logger

logger = get_component_logger(__name__, "webfrontend")

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<nav><a href="/">Home</a> | <a href="/weather">Weather</a></nav>
<main>
{body}
</main>
</body>
</html>
"""


class WeatherController:
    """Controller for the web front end pages."""

    def __init__(self, weather_api_client, max_items: int = 10):
        """Initialize weather controller.

        Args:
            weather_api_client: Client for the forecast backend
            max_items: Maximum number of forecasts shown on the weather page
        """
        self.weather_api_client = weather_api_client
        self.max_items = max_items

    def get_home(self) -> HTMLResponse:
        body = "<h1>Hello, world!</h1>\n<p>Welcome to your new app.</p>"
        return HTMLResponse(content=PAGE_TEMPLATE.format(title="Home", body=body))

    async def get_weather(self) -> HTMLResponse:
        """Render the forecast table, or a 502 page if the backend fails."""
        try:
            forecasts = await self.weather_api_client.get_weather(max_items=self.max_items)
        except WeatherApiError as e:
            logger.error(f"Weather backend error: {e}")
            body = "<h1>Weather</h1>\n<p>Forecast service is unavailable.</p>"
            return HTMLResponse(
                content=PAGE_TEMPLATE.format(title="Weather", body=body),
                status_code=502,
            )

        logger.info(f"Rendering {len(forecasts)} forecasts")
        body = "<h1>Weather</h1>\n<p>This component demonstrates showing data loaded from a backend API service.</p>\n"
        body += render_forecast_table(forecasts)
        return HTMLResponse(content=PAGE_TEMPLATE.format(title="Weather", body=body))


def render_forecast_table(forecasts: List[WeatherForecast]) -> str:
    if not forecasts:
        return "<p><em>No forecasts available.</em></p>"

    rows = []
    for forecast in forecasts:
        rows.append(
            "<tr>"
            f"<td>{forecast.date.isoformat()}</td>"
            f"<td>{forecast.temperature_c}</td>"
            f"<td>{forecast.temperature_f}</td>"
            f"<td>{escape(forecast.summary or '')}</td>"
            "</tr>"
        )
    return (
        '<table class="table">\n'
        "<thead><tr><th>Date</th><th>Temp. (C)</th><th>Temp. (F)</th><th>Summary</th></tr></thead>\n"
        "<tbody>\n" + "\n".join(rows) + "\n</tbody>\n</table>"
    )
