"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing CLI stages.
"""

from argparse import Namespace
from typing import Optional, Type, TypeVar, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: input, output, template, serve, verbosity
        - template_load: templateSource
        - host_parse: bindAddress, bindPort (serve mode only)
        - document_output: outputOK

    Attributes:
        input: Path of the Markdown source file
        output: Output file name (file mode) or route (serve mode)
        template: Optional path of a mustache template
        serve: Optional HOST string ("address:port") enabling serve mode
        verbosity: Logging verbosity level (1-3)
        templateSource: Template text, built-in default unless --template
        bindAddress: IP address parsed from --serve
        bindPort: TCP port parsed from --serve
        outputOK: Document written (file mode) or server stopped cleanly
    """

    # CLI arguments
    input: str = field(default="")
    output: Optional[str] = field(default=None)
    template: Optional[str] = field(default=None)
    serve: Optional[str] = field(default=None)
    verbosity: int = field(default=1)

    # Pipeline state
    templateSource: str = field(default="")
    bindAddress: str = field(default="")
    bindPort: int = field(default=0)
    outputOK: bool = field(default=False)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Options without a matching field are ignored.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(initial_state, template_load, host_parse, document_output)

    This is equivalent to:
        document_output(host_parse(template_load(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
