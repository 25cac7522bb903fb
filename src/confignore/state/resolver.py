"""
Service for resolving the effective exclusion state of paths

Every source predicate is evaluated for a path; the highest-precedence match
is the winning source and all matches are reported for diagnostics.
"""

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..fs import is_directory
from ..models import EffectiveState, Source, source_rank
from ..paths import Workspaces, get_workspace_relative_path
from ..utils import get_logger
from .sources import SourceCheck, default_source_checks, sort_by_precedence

logger = get_logger(__name__)

PathArg = Union[str, Path]


class StateResolver:
    """
    Multi-source precedence engine for tool exclusion
    """

    def __init__(self, workspaces: Workspaces,
                 sources: Optional[Iterable[SourceCheck]] = None):
        """
        Args:
            workspaces: Workspace folders used to locate a path's owner
            sources: Source checks; re-sorted into precedence order (defaults to all built-ins)
        """
        self.workspaces = workspaces
        self.sources: List[SourceCheck] = sort_by_precedence(
            sources if sources is not None else default_source_checks()
        )

    async def resolve_state(self, path: PathArg) -> EffectiveState:
        """
        Resolve the effective state for a single path

        Args:
            path: File or folder path

        Returns:
            EffectiveState with the winning source and every source that matched
        """
        path = Path(path)
        workspace = self.workspaces.get_workspace_folder(path)
        if workspace is None:
            return EffectiveState(path=path)

        rel_path = get_workspace_relative_path(path, workspace)
        if not rel_path:
            return EffectiveState(path=path)

        # Directory-only patterns (trailing '/') need the directory marker
        if await is_directory(path):
            rel_path = rel_path + '/'

        results = await asyncio.gather(
            *(check.predicate(workspace, rel_path) for check in self.sources),
            return_exceptions=True,
        )

        # gather returns results in submission order, which is precedence order
        sources_applied: List[Source] = []
        for check, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(f"Source {check.source.value} failed for {rel_path}: {result}")
                continue
            if result:
                sources_applied.append(check.source)

        winner = sources_applied[0] if sources_applied else None
        logger.debug(
            f"State for {rel_path}: excluded={winner is not None} "
            f"source={winner.value if winner else None} "
            f"applied={[s.value for s in sources_applied]}"
        )
        return EffectiveState(
            path=path,
            excluded=winner is not None,
            mixed=False,
            source=winner,
            sources_applied=sources_applied,
        )

    async def resolve_states(self, paths: Sequence[PathArg]) -> EffectiveState:
        """
        Resolve the aggregate state for a selection of paths

        Args:
            paths: Selected files or folders

        Returns:
            A single EffectiveState. When members disagree, ``mixed`` is set,
            ``source`` is cleared and ``excluded`` follows the majority.
        """
        if not paths:
            return EffectiveState(path=None)

        if len(paths) == 1:
            return await self.resolve_state(paths[0])

        states = await asyncio.gather(*(self.resolve_state(p) for p in paths))
        excluded_count = sum(1 for s in states if s.excluded)

        if excluded_count in (0, len(states)):
            union = sorted(
                {source for state in states for source in state.sources_applied},
                key=source_rank,
            )
            first = states[0]
            return EffectiveState(
                path=first.path,
                excluded=first.excluded,
                mixed=False,
                source=first.source,
                sources_applied=union,
            )

        # Display summary only; callers needing per-path detail re-query each path
        return EffectiveState(
            path=states[0].path,
            excluded=excluded_count > len(states) - excluded_count,
            mixed=True,
            source=None,
            sources_applied=[],
        )
