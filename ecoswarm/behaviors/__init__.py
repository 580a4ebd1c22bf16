"""
EcoSwarm Behaviors
==================
Per-species step functions and the dispatch table keyed by Species.

Every step function has the signature
    step(agent, ctx, lists) -> AgentOutcome
and mutates the agent in place.
"""

from typing import Callable, Dict

from ..agents import Agent
from ..config import Species
from ..context import AgentOutcome, SimulationContext, SpeciesLists
from .ant import step_ant
from .bird import step_bird
from .anteater import step_anteater
from .snake import step_snake

StepFunction = Callable[[Agent, SimulationContext, SpeciesLists], AgentOutcome]

BEHAVIORS: Dict[Species, StepFunction] = {
    Species.ANT: step_ant,
    Species.BIRD: step_bird,
    Species.ANTEATER: step_anteater,
    Species.SNAKE: step_snake,
}


def step_agent(agent: Agent, ctx: SimulationContext, lists: SpeciesLists) -> AgentOutcome:
    """Dispatch one agent to its species behavior"""
    return BEHAVIORS[agent.species](agent, ctx, lists)


__all__ = [
    'BEHAVIORS',
    'StepFunction',
    'step_agent',
    'step_ant',
    'step_bird',
    'step_anteater',
    'step_snake',
]
