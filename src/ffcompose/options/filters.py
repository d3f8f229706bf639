"""Filter chain and complex filter graph rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from ffcompose.options.stream import StreamSpecifier
from ffcompose.options.values import Ratio, Scale


@dataclass(frozen=True)
class FilterOptions:
    """A simple filter chain for -filter.

    Sub-filters render in a fixed order (setsar, scale, scale_npp, select)
    and only when set.
    """

    sar: Ratio | None = None
    scale: Scale | None = None
    scale_npp: Scale | None = None
    select: str | None = None

    def render(self) -> str:
        items: list[str] = []
        if self.sar is not None:
            items.append(f"setsar={self.sar.render()}")
        if self.scale is not None:
            items.append(f"scale={self.scale.render()}")
        if self.scale_npp is not None:
            items.append(f"scale_npp={self.scale_npp.render()}")
        if self.select:
            items.append(f"select={self.select}")
        return ",".join(items)


@dataclass(frozen=True)
class ComplexFilterOption:
    """One chain of a -filter_complex graph.

    Renders as ``[in1][in2]filter1,filter2[out1][out2]``.
    """

    filters: list[str] = field(default_factory=list)
    input_streams: list[StreamSpecifier] = field(default_factory=list)
    output_streams: list[StreamSpecifier] = field(default_factory=list)

    def render(self) -> str:
        inputs = "".join(f"[{s.render()}]" for s in self.input_streams)
        outputs = "".join(f"[{s.render()}]" for s in self.output_streams)
        return inputs + ",".join(self.filters) + outputs


def render_filter_graph(chains: list[ComplexFilterOption]) -> str:
    """Join several filter chains into a single graph description."""
    return ";".join(chain.render() for chain in chains)
