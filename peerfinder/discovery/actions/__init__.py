from .action_runner import (
    ActionResult as ActionResult,
    ActionRunner as ActionRunner,
)
