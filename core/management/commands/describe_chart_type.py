"""Print a chart type's default config and editable properties as JSON."""

from __future__ import annotations

import json
from dataclasses import asdict

from django.core.management.base import BaseCommand, CommandError

from core.charting.configs import UnknownChartTypeError, get_default_config, list_chart_types
from core.charting.properties import get_properties_for_chart_type
from core.charting.snapshot_codec import encode_chart_config


class Command(BaseCommand):
    """Describe the default configuration of a chart type."""

    help = "Print the default ChartConfig and property metadata for a chart type as JSON."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("chart_type", help=f"One of: {', '.join(list_chart_types())}.")
        parser.add_argument(
            "--indent",
            type=int,
            default=2,
            help="JSON indentation (default: 2; 0 prints compact output).",
        )
        parser.add_argument(
            "--properties-only",
            action="store_true",
            help="Only print the property metadata.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        chart_type: str = options["chart_type"]
        indent: int = options["indent"]
        if indent < 0:
            raise CommandError("--indent must be zero or positive.")

        try:
            config = get_default_config(chart_type)
        except UnknownChartTypeError as exc:
            raise CommandError(str(exc)) from exc

        properties = [
            {**asdict(prop), "field_dtypes": sorted(prop.field_dtypes) if prop.field_dtypes is not None else None}
            for prop in get_properties_for_chart_type(chart_type)
        ]
        payload: dict[str, object] = {"chart_type": chart_type, "properties": properties}
        if not options["properties_only"]:
            payload["default_config"] = encode_chart_config(config)

        self.stdout.write(json.dumps(payload, indent=indent or None, sort_keys=False))
        return None
