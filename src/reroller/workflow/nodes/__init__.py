"""Workflow nodes for the reroll state machine."""

from reroller.workflow.nodes.apply_patch import ApplyPatch
from reroller.workflow.nodes.checkout_target import CheckoutTarget
from reroller.workflow.nodes.continue_rebase import ContinueRebase
from reroller.workflow.nodes.create_branch import CreateBranch
from reroller.workflow.nodes.finish import Finish
from reroller.workflow.nodes.generate_patch import GeneratePatch
from reroller.workflow.nodes.locate import Locate
from reroller.workflow.nodes.rebase import Rebase
from reroller.workflow.nodes.validate import Validate
from reroller.workflow.nodes.verify import Verify

__all__ = [
    "Validate",
    "CheckoutTarget",
    "Locate",
    "CreateBranch",
    "ApplyPatch",
    "Rebase",
    "ContinueRebase",
    "GeneratePatch",
    "Verify",
    "Finish",
]
