"""Export the completed list of the aid board as a CSV file."""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import requests

from .api_utils import RetryPolicy, TrelloClient
from .exceptions import EmptyListError
from .models import TrelloCard

log = logging.getLogger(__name__)

# The "payment completed" list of the aid board
COMPLETED_LIST_ID = "5e7d45a393cb705078c08e5b"


@dataclass
class ExportConfig:
    """Settings for one export run, built once from the command line."""

    api_key: str
    token: str
    output_path: Path = Path("output.csv")
    list_id: str = COMPLETED_LIST_ID
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)


class CardExporter:
    """Fetches the completed cards, inflates them and writes them as CSV."""

    def __init__(
        self, config: ExportConfig, session: Optional[requests.Session] = None
    ):
        """Initialize the exporter.

        Args:
            config: Export settings
            session: HTTP session to use, a new one by default

        """
        self.config = config
        self.output_path = Path(config.output_path)
        self.client = TrelloClient(
            config.api_key,
            config.token,
            session=session,
            policy=config.retry_policy,
        )

    def fetch_completed_cards(self) -> List[TrelloCard]:
        """Fetch every card in the completed list, in API order."""
        log.info("Fetching cards in list %s...", self.config.list_id)
        cards = [
            TrelloCard.from_api(item)
            for item in self.client.list_cards(self.config.list_id)
        ]
        log.info("Found %d cards", len(cards))
        return cards

    def export(self) -> int:
        """Run the export.

        The first failing card stops the run. Rows written before it stay in
        the output file.

        Returns:
            Number of card rows written

        """
        cards = self.fetch_completed_cards()

        written = 0
        with open(self.output_path, "w", encoding="utf-8", newline="") as f:
            if not cards:
                raise EmptyListError(
                    f"List {self.config.list_id} has no cards to export"
                )

            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(TrelloCard.csv_header())

            for i, card in enumerate(cards, 1):
                log.debug("[%d/%d] Exporting card %s", i, len(cards), card.title)
                card.inflate(self.client, self.config.list_id)
                writer.writerow(card.csv_row())
                written += 1

        log.info("Wrote %d rows to %s", written, self.output_path)
        return written
