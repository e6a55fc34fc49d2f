# egg_game/storage/chart_exporter.py

"""Generate interactive Plotly HTML charts from the egg price history."""

import importlib
import logging
import webbrowser
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from egg_game.config.settings import Settings
from egg_game.models.price_event import PriceAction, PriceEvent
from egg_game.services.price_predictor import PricePrediction

logger = logging.getLogger("egg_game.chart")

_CHARTS_DIR: Path = Settings.EXPORTS_DIR / "charts"

_ACTION_COLORS: dict[PriceAction, str] = {
    PriceAction.PURCHASE: "red",
    PriceAction.UPDATE: "steelblue",
    PriceAction.START: "black",
}

# Headroom above the highest price on the y axis
_Y_PADDING = 5


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _get_plotly_subplots() -> ModuleType:
    """Import plotly.subplots lazily."""
    return importlib.import_module("plotly.subplots")


def _ensure_charts_dir() -> Path:
    """Create charts directory if it doesn't exist."""
    _CHARTS_DIR.mkdir(parents=True, exist_ok=True)
    return _CHARTS_DIR


def build_session_chart(
    history: Sequence[PriceEvent],
    prediction: PricePrediction | None = None,
) -> Any:
    """Build the price history + prediction figure.

    The left panel plots *history* with markers coloured by action and a
    "Buy" annotation on each purchase. The right panel is a rug of the
    prediction samples at the prediction timestamp. Both share a y range
    of ``[0, max price + 5]``.
    """
    if not history:
        raise ValueError("Cannot chart an empty price history")

    go = _get_plotly_go()
    subplots = _get_plotly_subplots()

    times = [e.timestamp for e in history]
    prices = [e.price for e in history]
    colors = [_ACTION_COLORS[e.action] for e in history]
    y_max = max(prices) + _Y_PADDING

    fig: Any = subplots.make_subplots(
        rows=1,
        cols=2,
        column_widths=[0.75, 0.25],
        subplot_titles=("Egg Price History", "Egg Price Prediction"),
    )
    fig.add_trace(
        go.Scatter(
            x=times,
            y=prices,
            mode="lines+markers",
            name="Price",
            line={"color": "steelblue"},
            marker={"color": colors, "size": 10},
            customdata=[e.action.value for e in history],
            hovertemplate=(
                "%{x|%H:%M:%S}<br>"
                "Price: %{y:.2f} points<br>"
                "%{customdata}"
                "<extra></extra>"
            ),
        ),
        row=1,
        col=1,
    )

    for event in history:
        if event.action is not PriceAction.PURCHASE:
            continue
        fig.add_annotation(
            x=event.timestamp,
            y=event.price,
            text="Buy",
            showarrow=True,
            arrowhead=4,
            arrowsize=1,
            arrowwidth=2,
            arrowcolor="red",
            ax=20,
            ay=-40,
            row=1,
            col=1,
        )

    if prediction is not None:
        fig.add_trace(
            go.Scatter(
                x=[prediction.timestamp] * len(prediction.samples),
                y=list(prediction.samples),
                mode="markers",
                name="Prediction",
                marker={
                    "symbol": "line-ew-open",
                    "size": 16,
                    "color": "black",
                },
                hovertemplate="Predicted: %{y:.2f}<extra></extra>",
            ),
            row=1,
            col=2,
        )
        y_max = max(y_max, max(prediction.samples) + _Y_PADDING)

    fig.update_xaxes(title_text="Time")
    fig.update_yaxes(title_text="Price (points)", range=[0, y_max])
    fig.update_layout(
        title="The Game of Eggs",
        hovermode="closest",
        template="plotly_white",
        showlegend=False,
    )
    return fig


def export_session_chart(
    history: Sequence[PriceEvent],
    prediction: PricePrediction | None = None,
    open_browser: bool = True,
) -> Path | None:
    """Write the session chart to an HTML file and return its path."""
    if not history:
        logger.warning("No price history to chart")
        return None

    fig = build_session_chart(history, prediction)

    charts_dir = _ensure_charts_dir()
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = charts_dir / f"egg_prices_{stamp}.html"
    fig.write_html(str(filepath))
    logger.info("Chart saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
