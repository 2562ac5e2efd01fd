"""
Diagram renderers for numbered relationship lines (DOT and XMILE).
"""
from typing import Dict, Iterable, List, Tuple

from ..utils import POSITIVE_SYMBOL, clean_symbol, extract_variables, xmile_name


def _edges(lines: Iterable[str]) -> List[Tuple[str, str, str]]:
    edges = []
    for line in lines:
        subject, obj, symbol = extract_variables(line)
        if not subject or not obj or subject == obj:
            continue
        edges.append((subject, obj, symbol or POSITIVE_SYMBOL))
    return edges


def render_dot(lines: Iterable[str]) -> str:
    """Graphviz digraph with the polarity marker as edge label."""
    dot = 'digraph G {\n  rankdir=LR;\n  node [shape=box];\n'
    for subject, obj, symbol in _edges(lines):
        dot += f'  "{subject}" -> "{obj}" [label="{symbol}"];\n'
    dot += "}\n"
    return dot


def render_xmile(lines: Iterable[str]) -> str:
    """XMILE model with one auxiliary per caused variable and a connector per link."""
    causers: Dict[str, List[str]] = {}
    connectors = ""
    for subject, obj, symbol in _edges(lines):
        causers.setdefault(obj, []).append(subject)
        connectors += f'\t\t\t\t<connector polarity="{clean_symbol(symbol)}">\n'
        connectors += f"\t\t\t\t\t<from>{xmile_name(subject)}</from>\n"
        connectors += f"\t\t\t\t\t<to>{xmile_name(obj)}</to>\n"
        connectors += "\t\t\t\t</connector>\n"

    variables = ""
    for variable, causes in causers.items():
        variables += f'\t\t\t<aux name="{variable}">\n'
        variables += f"\t\t\t\t<eqn>NAN({','.join(xmile_name(c) for c in causes)})</eqn>\n"
        variables += "\t\t\t\t<isee:delay_aux/>\n"
        variables += "\t\t\t</aux>\n"

    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<xmile version="1.0" xmlns="http://docs.oasis-open.org/xmile/ns/XMILE/v1.0" '
        'xmlns:isee="http://iseesystems.com/XMILE">\n'
        "\t<model>\n"
        f"\t\t<variables>\n{variables}\t\t</variables>\n"
        f"\t\t<views>\n{connectors}\t\t</views>\n"
        "\t</model>\n"
        "</xmile>"
    )
