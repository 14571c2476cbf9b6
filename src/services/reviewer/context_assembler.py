"""Pack per-file diffs into a single prompt section that fits a token budget."""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from src.config import settings
from src.core.diff import find_first_hunk_header
from src.core.logging import get_logger
from src.services.reviewer.schemas import FileDiff, TokenBudget
from src.services.reviewer.tokens import CharTokenCounter, TokenCounter

logger = get_logger("reviewer.context_assembler")

NO_FILES_MESSAGE = "No files to process"
PATCH_OMITTED_MARKER = "[Patch could not be included due to token limit]"
PATCH_SEVERELY_TRUNCATED_MARKER = "[Patch severely truncated due to token limit]"
PATCH_TRUNCATED_MARKER = "[Patch truncated due to token limit]"


def clip_patch(
    patch: str,
    available_tokens: int,
    token_counter: TokenCounter,
    min_tokens: int = 100,
) -> str:
    """Clip a patch to roughly `available_tokens`, keeping added lines first.

    Removed lines are dropped. Added lines are taken in order until one no
    longer fits, then context lines the same way. The output is the header,
    the kept added lines, then the kept context lines.

    Args:
        patch: Unified diff for one file
        available_tokens: Token allowance for the clipped patch
        token_counter: Estimator shared with the caller
        min_tokens: Below this allowance only the first hunk header is kept

    Returns:
        The clipped patch ending with a truncation marker, or a sentinel
        when the patch has no hunk header to anchor on
    """
    lines = patch.split("\n")
    header_index = find_first_hunk_header(lines)

    if header_index < 0:
        return PATCH_OMITTED_MARKER

    header = lines[header_index]
    if available_tokens < min_tokens:
        return f"{header}\n\n{PATCH_SEVERELY_TRUNCATED_MARKER}"

    added: list[int] = []
    context: list[int] = []
    for index, line in enumerate(lines):
        if line.startswith("+"):
            if not line.startswith("+++"):
                added.append(index)
        elif not line.startswith("-"):
            context.append(index)

    selected = [header_index]
    used_tokens = token_counter.count(header + "\n")

    for candidates in (added, context):
        for index in candidates:
            if index == header_index:
                continue
            line_tokens = token_counter.count(lines[index] + "\n")
            if used_tokens + line_tokens > available_tokens:
                break
            selected.append(index)
            used_tokens += line_tokens

    # Header, then kept added lines, then kept context lines
    clipped = "".join(lines[index] + "\n" for index in selected)
    return f"{clipped}\n{PATCH_TRUNCATED_MARKER}"


def format_file_block(filename: str, patch: str) -> str:
    return f"File: '{filename.strip()}'\n{patch.strip()}"


def format_remaining_files(filenames: Sequence[str]) -> str:
    listing = "\n".join(f"- {name}" for name in filenames)
    return f"\n\nAdditional modified files (insufficient token budget to process):\n{listing}"


@dataclass
class PackingState:
    """Running totals while files are placed into the budget."""

    total_tokens: int
    blocks: list[str] = field(default_factory=list)
    remaining: list[str] = field(default_factory=list)
    processed_any: bool = False

    def accept(self, block: str, tokens: int) -> None:
        self.blocks.append(block)
        self.total_tokens += tokens
        self.processed_any = True

    def defer(self, filename: str) -> None:
        self.remaining.append(filename)


class ContextAssembler:
    """Select, clip and concatenate file diffs under a token budget.

    Smaller files go first so that as many distinct files as possible make it
    in. At least one file is always included, clipped if necessary; files that
    do not fit are listed by name at the end instead of being dropped silently.
    """

    def __init__(
        self,
        token_counter: Optional[TokenCounter] = None,
        budget: Optional[TokenBudget] = None,
        clip_min_tokens: Optional[int] = None,
        emergency_token_budget: Optional[int] = None,
    ) -> None:
        self.token_counter = token_counter or CharTokenCounter()
        self.budget = budget or TokenBudget.from_settings()
        self.clip_min_tokens = (
            settings.clip_min_tokens if clip_min_tokens is None else clip_min_tokens
        )
        self.emergency_token_budget = (
            settings.emergency_token_budget
            if emergency_token_budget is None
            else emergency_token_budget
        )

    def count_tokens(self, text: str) -> int:
        return self.token_counter.count(text)

    def clip(self, patch: str, available_tokens: int) -> str:
        return clip_patch(patch, available_tokens, self.token_counter, self.clip_min_tokens)

    def assemble(
        self,
        files: Sequence[FileDiff],
        prompt_tokens: int = 0,
        overflow: Sequence[str] = (),
    ) -> str:
        """Build the diff section of the review prompt.

        Args:
            files: Changed files; files without a patch are ignored
            prompt_tokens: Tokens already used by the fixed instructions
            overflow: Names of files left out before packing; they are
                listed in the remaining-files notice after the deferred ones

        Returns:
            File blocks joined by blank lines, plus a notice naming files
            that did not fit
        """
        candidates = [f for f in files if f.patch]
        if not candidates:
            return NO_FILES_MESSAGE

        ordered = sorted(candidates, key=lambda f: self.count_tokens(f.patch))
        state = PackingState(total_tokens=prompt_tokens)

        for file in ordered:
            self._place(file, state)

        if not state.processed_any:
            self._include_emergency(ordered[0], state)

        for name in overflow:
            state.defer(name)

        if state.remaining:
            logger.info(
                f"{len(state.remaining)} files left out of the review context: {state.remaining}"
            )
            state.blocks.append(format_remaining_files(state.remaining))

        file_count = len(ordered) + len(overflow)
        logger.debug(
            f"Assembled {file_count - len(state.remaining)}/{file_count} files "
            f"({state.total_tokens}/{self.budget.max_tokens} tokens)"
        )
        return "\n\n".join(state.blocks)

    def _place(self, file: FileDiff, state: PackingState) -> None:
        """Accept, clip or defer one file."""
        block = format_file_block(file.filename, file.patch)
        block_tokens = self.count_tokens(block)
        is_first_file = not state.processed_any

        if state.total_tokens > self.budget.hard_limit and not is_first_file:
            logger.debug(f"Deferring {file.filename}: budget exhausted")
            state.defer(file.filename)
            return

        if state.total_tokens + block_tokens <= self.budget.soft_limit:
            state.accept(block, block_tokens)
            return

        clipped = self.clip(file.patch, self.budget.soft_limit - state.total_tokens)
        clipped_tokens = self.count_tokens(clipped)

        # The first file is never deferred, even when its clip overruns
        if state.total_tokens + clipped_tokens <= self.budget.soft_limit or is_first_file:
            logger.debug(f"Clipped {file.filename} from {block_tokens} to {clipped_tokens} tokens")
            state.accept(format_file_block(file.filename, clipped), clipped_tokens)
            return

        logger.debug(f"Deferring {file.filename}: clipped patch still over budget")
        state.defer(file.filename)

    def _include_emergency(self, file: FileDiff, state: PackingState) -> None:
        """Force the smallest file in under a fixed ceiling."""
        available = min(
            self.budget.hard_limit - state.total_tokens,
            self.emergency_token_budget,
        )
        logger.warning(f"No file fit the budget, force-including {file.filename}")
        clipped = self.clip(file.patch, available)
        state.accept(format_file_block(file.filename, clipped), self.count_tokens(clipped))
