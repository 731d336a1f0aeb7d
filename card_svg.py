"""
Profile card renderer.

Builds the dark/light SVG documents from a finished ProfileStats snapshot and
the uptime string. Pure formatting: no network, no files.

Value tspan IDs:
  age_data, repo_data, contrib_data, star_data, commit_data, follower_data,
  loc_data, loc_add, loc_del
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from lxml import etree

from stats_model import ProfileStats

SVG_NS = "http://www.w3.org/2000/svg"
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

START_Y = 30
LINE_HEIGHT = 20
LEFT_PADDING = 15.0
GAP_BETWEEN_COLUMNS = 10.0
RIGHT_PADDING = 30.0
CHAR_WIDTH = 9.6  # monospaced glyph width at 16px
MIN_RIGHT_COL_CHARS = 50

THEMES: Dict[str, Dict[str, str]] = {
    'dark': {'bg': '#161b22', 'text': '#c9d1d9', 'key': '#ffa657', 'value': '#a5d6ff', 'cc': '#616e7f'},
    'light': {'bg': '#ffffff', 'text': '#24292f', 'key': '#d73a49', 'value': '#0366d6', 'cc': '#6a737d'},
}

STYLE = """
.key {{ fill: {key}; }}
.value {{ fill: {value}; }}
.cc {{ fill: {cc}; }}
.addColor {{ fill: #3fb950; }}
.delColor {{ fill: #f85149; }}
"""


def format_int(num: int) -> str:
    return f"{num:,}"


def _px(value: float) -> str:
    return f"{round(value, 1):g}"


def _el(parent, tag: str, text: Optional[str] = None, **attrs) -> etree._Element:
    el = etree.SubElement(parent, f"{{{SVG_NS}}}{tag}", **attrs)
    if text is not None:
        el.text = text
    return el


def build_stat_row(key: str, value: str, align_width: int) -> Tuple[str, str, str]:
    """Split a row into (key part, dot leader, value) padded to `align_width`."""
    key_part = f"{key}: "
    available = max(0, align_width - len(key_part) - len(value))
    if available == 0:
        dots = ''
    elif available == 1:
        dots = ' '
    elif available == 2:
        dots = '. '
    else:
        dots = '.' * available
    return key_part, dots, value


def build_header_line(label: str, align_width: int) -> str:
    base = f"{label} "
    return base + '-' * (max(0, align_width - len(base)) + 2)


def _stat_values(stats: ProfileStats) -> Dict[str, str]:
    return {
        'repos': format_int(stats.repos),
        'contrib': format_int(stats.contributed),
        'stars': format_int(stats.stars),
        'commits': format_int(stats.commits),
        'followers': format_int(stats.followers),
        'loc_net': format_int(stats.loc_net),
        'loc_add': f"+{format_int(stats.loc_add)}",
        'loc_del': f"-{format_int(stats.loc_del)}",
    }


def _row_start(text_el, key: str, dots: str, x: str, y: int):
    _el(text_el, 'tspan', '. ', x=x, y=str(y), **{'class': 'cc'})
    _el(text_el, 'tspan', key, **{'class': 'key'})
    _el(text_el, 'tspan', dots, **{'class': 'cc'})


def render_card(stats: ProfileStats, age: str, theme: str = 'dark', login: str = '',
                ascii_art: Optional[str] = None) -> bytes:
    colors = THEMES[theme]
    v = _stat_values(stats)
    repos_text = f"{v['repos']} (Contributed: {v['contrib']})"
    loc_text = f"{v['loc_net']} ( {v['loc_add']}, {v['loc_del']} )"

    rows: List[Tuple[str, str]] = [
        ('Uptime', age),
        ('Repos', repos_text),
        ('Stars', v['stars']),
        ('Commits', v['commits']),
        ('Followers', v['followers']),
        ('Lines of Code', loc_text),
    ]
    align_width = max([len(k) + 2 + len(val) for k, val in rows] + [MIN_RIGHT_COL_CHARS])

    ascii_lines = ascii_art.splitlines() if ascii_art else []
    if ascii_lines:
        ascii_width_px = max(len(line) for line in ascii_lines) * CHAR_WIDTH + LEFT_PADDING
        right_x = ascii_width_px + GAP_BETWEEN_COLUMNS
    else:
        right_x = LEFT_PADDING
    ascii_height_px = len(ascii_lines) * LINE_HEIGHT + START_Y

    # line layout: header, uptime, blank, stats header, five stat rows
    right_line_count = 9
    right_height_px = right_line_count * LINE_HEIGHT + START_Y
    width = _px(right_x + align_width * CHAR_WIDTH + RIGHT_PADDING)
    height = _px(max(ascii_height_px, right_height_px) + 30)

    svg = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS}, attrib={
        'width': f"{width}px",
        'height': f"{height}px",
        'font-family': 'ConsolasFallback,Consolas,monospace',
        'font-size': '16px',
    })
    _el(svg, 'style', STYLE.format(**colors))
    _el(svg, 'rect', width=f"{width}px", height=f"{height}px", fill=colors['bg'], rx='15')

    if ascii_lines:
        left = _el(svg, 'text', fill=colors['text'], **{XML_SPACE: 'preserve'})
        for i, line in enumerate(ascii_lines):
            _el(left, 'tspan', line, x=_px(LEFT_PADDING), y=str(START_Y + i * LINE_HEIGHT))

    right = _el(svg, 'text', fill=colors['text'], **{XML_SPACE: 'preserve'})
    x = _px(right_x)

    def y_of(line_no: int) -> int:
        return START_Y + line_no * LINE_HEIGHT

    _el(right, 'tspan', build_header_line(f"{login}@github" if login else "github", align_width),
        x=x, y=str(y_of(0)))

    key, dots, value = build_stat_row('Uptime', age, align_width)
    _row_start(right, key, dots, x, y_of(1))
    _el(right, 'tspan', value, id='age_data', **{'class': 'value'})

    _el(right, 'tspan', build_header_line('- GitHub Stats', align_width), x=x, y=str(y_of(3)))

    key, dots, _ = build_stat_row('Repos', repos_text, align_width)
    _row_start(right, key, dots, x, y_of(4))
    _el(right, 'tspan', v['repos'], id='repo_data', **{'class': 'value'})
    _el(right, 'tspan', ' (Contributed: ', **{'class': 'cc'})
    _el(right, 'tspan', v['contrib'], id='contrib_data', **{'class': 'value'})
    _el(right, 'tspan', ')', **{'class': 'cc'})

    for line_no, (label, id_attr, key_name) in enumerate([
        ('Stars', 'star_data', 'stars'),
        ('Commits', 'commit_data', 'commits'),
        ('Followers', 'follower_data', 'followers'),
    ], start=5):
        key, dots, value = build_stat_row(label, v[key_name], align_width)
        _row_start(right, key, dots, x, y_of(line_no))
        _el(right, 'tspan', value, id=id_attr, **{'class': 'value'})

    key, dots, _ = build_stat_row('Lines of Code', loc_text, align_width)
    _row_start(right, key, dots, x, y_of(8))
    _el(right, 'tspan', v['loc_net'], id='loc_data', **{'class': 'value'})
    _el(right, 'tspan', ' ( ', **{'class': 'cc'})
    _el(right, 'tspan', v['loc_add'], id='loc_add', **{'class': 'addColor'})
    _el(right, 'tspan', ', ', **{'class': 'cc'})
    _el(right, 'tspan', v['loc_del'], id='loc_del', **{'class': 'delColor'})
    _el(right, 'tspan', ' )', **{'class': 'cc'})

    return etree.tostring(svg, encoding='utf-8', xml_declaration=True)


def render_cards(stats: ProfileStats, age: str, login: str = '',
                 ascii_art: Optional[str] = None) -> Dict[str, bytes]:
    return {theme: render_card(stats, age, theme, login, ascii_art) for theme in THEMES}
