"""Graph workflow definition."""

from pydantic_graph import End, Graph

from reroller.core.config import State
from reroller.core.log import logger
from reroller.core.result import RerollResult


def create_workflow():
    """Create the reroll workflow graph.

    Validate → CheckoutTarget → [End: not needed] → Locate →
        CreateBranch → ApplyPatch → Rebase → [End: conflicts]
        → GeneratePatch → Verify → Finish

    A resumed session enters at ContinueRebase, which joins the main
    line at GeneratePatch or suspends again.

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Imported here so the graph can resolve the nodes' return
    # annotations from this namespace
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

    return Graph(
        nodes=(
            Validate,
            CheckoutTarget,
            Locate,
            CreateBranch,
            ApplyPatch,
            Rebase,
            ContinueRebase,
            GeneratePatch,
            Verify,
            Finish,
        ),
        state_type=State,
    )


async def run_workflow(start, state: State) -> RerollResult:
    """Run the graph from start until it ends.

    Raises:
        RerollError: Whatever the failing node raised
    """
    workflow = create_workflow()
    async with workflow.iter(start, state=state) as run:
        async for node in run:
            if isinstance(node, End):
                return node.data

    raise RuntimeError("Reroll workflow ended without a result")
