"""World tools exposed to the model.

  registry  — ToolName, ToolDescriptor, REGISTRY, lookup(), tool_schemas()
  executor  — ToolExecutor: validates and runs ToolCalls, adds remediation hints
  enemies   — enemy lookup / random / create / listings
  items     — item lookup / shop / random / add / listings
"""

from .errors import ToolError  # noqa: F401
from .executor import REMEDIATION_HINTS, ToolExecutor, remediation_hint  # noqa: F401
from .registry import REGISTRY, ToolDescriptor, ToolName, lookup, tool_schemas  # noqa: F401
