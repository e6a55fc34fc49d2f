# egg_game/storage/file_manager.py

"""Handles exporting a session's price history to disk."""

import csv
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from egg_game.config.settings import Settings
from egg_game.models.price_event import PriceEvent

logger = logging.getLogger("egg_game.storage")


class FileManager:
    """Handles exporting a session's price history to disk."""

    def __init__(self) -> None:
        self.exports_dir: Path = Settings.EXPORTS_DIR
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "FileManager initialised, exports_dir=%s", self.exports_dir
        )

    def save_history(self, events: Sequence[PriceEvent]) -> Path:
        """Save the price history to a timestamped JSON file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.exports_dir / f"history_{timestamp}.json"

        data = [e.to_dict() for e in events]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info("Saved %d price events to %s", len(events), filepath)
        return filepath

    def export_csv(self, events: Sequence[PriceEvent]) -> Path:
        """Export the price history to a CSV file in timeline order."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.exports_dir / f"history_{timestamp}.csv"

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Timestamp", "Price", "Action"])
            for e in events:
                writer.writerow(
                    [e.timestamp.isoformat(), f"{e.price:.2f}", e.action.value]
                )

        logger.info(
            "Exported %d price events to %s", len(events), filepath
        )
        return filepath
