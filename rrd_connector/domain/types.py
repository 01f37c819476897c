"""Domain types and aliases."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import pandas as pd

Timestamp = datetime
Step = timedelta
PlotValue = float

# Export table: one column per exported identifier, one row per step
ExportTable = pd.DataFrame

# Printed statistic lines, shaped "label,key,value"
StatLines = list[str]

# Identifier -> series or group label
SeriesLabels = dict[str, str]

# JSON-serializable types (recursive)
if TYPE_CHECKING:
    JsonValue = str | int | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
else:
    JsonValue = str | int | float | bool | None | dict | list

ConnectorConfigMap = dict[str, JsonValue]
