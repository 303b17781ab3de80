"""Edgeworth box: two agents sharing fixed totals of two goods.

Agent 1 owns the bottom-left corner, agent 2 the top-right. Box dimensions
are always derived from the agents' endowments, so replacing an agent is the
only way to resize the box.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from portfolio_lab.config.types import CurveConfig
from portfolio_lab.econ.curves import sample_indifference_curve
from portfolio_lab.econ.utility import (
    Agent,
    BoxDimensions,
    Point,
    box_dimensions,
    evaluate_utility,
)


def _check_index(agent_index: int) -> None:
    if agent_index not in (1, 2):
        raise ValueError("agent_index must be 1 or 2")


@dataclass(frozen=True)
class EdgeworthBox:
    """Two agents and the box spanned by their combined endowments."""

    agent1: Agent = field(default_factory=Agent)
    agent2: Agent = field(default_factory=Agent)

    @property
    def dimensions(self) -> BoxDimensions:
        return box_dimensions(self.agent1, self.agent2)

    @property
    def endowment_point(self) -> Point:
        """The endowment allocation in box (agent 1) coordinates."""
        return self.agent1.endowment

    def agent(self, agent_index: int) -> Agent:
        _check_index(agent_index)
        return self.agent1 if agent_index == 1 else self.agent2

    def with_agent(self, agent_index: int, agent: Agent) -> EdgeworthBox:
        _check_index(agent_index)
        if agent_index == 1:
            return replace(self, agent1=agent)
        return replace(self, agent2=agent)

    def with_endowment(self, agent_index: int, x: object = None, y: object = None) -> EdgeworthBox:
        """Return a box with one agent's endowment updated through the clamp."""
        return self.with_agent(agent_index, self.agent(agent_index).with_endowment(x, y))

    def utility_at(self, agent_index: int, point: Point) -> float:
        """Utility of the allocation at box-coordinate *point* for one agent."""
        agent = self.agent(agent_index)
        return evaluate_utility(
            agent.utility_function,
            point,
            is_agent2=agent_index == 2,
            box=self.dimensions,
        )

    def endowment_utility(self, agent_index: int) -> float:
        return self.utility_at(agent_index, self.endowment_point)

    def indifference_curve(
        self,
        agent_index: int,
        level: float | None = None,
        config: CurveConfig | None = None,
    ) -> list[Point]:
        """Sample one agent's curve in box coordinates.

        ``level`` defaults to the agent's utility at the endowment, which gives
        the curve passing through the endowment point.
        """
        agent = self.agent(agent_index)
        if level is None:
            level = self.endowment_utility(agent_index)
        return sample_indifference_curve(
            agent.utility_function,
            level,
            self.dimensions,
            is_agent2=agent_index == 2,
            config=config,
        )

    def curves_through_endowment(
        self, config: CurveConfig | None = None
    ) -> dict[int, list[Point]]:
        return {index: self.indifference_curve(index, config=config) for index in (1, 2)}
