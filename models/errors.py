"""Exception taxonomy shared by the evidence pipeline and the simulator.

Stage boundaries convert these into ``StepResult`` objects; they are not
meant to cross into the orchestration layer uncaught.
"""


class PipelineError(Exception):
    """Base class for every failure raised inside the pipeline."""


class TickerValidationError(PipelineError):
    """The requested symbol could not be resolved to a tradable ticker."""


class UpstreamFetchError(PipelineError):
    """A search or price provider call failed or returned nothing usable."""


class ModelOutputError(PipelineError):
    """A generative step raised, returned nothing, or broke its schema."""
