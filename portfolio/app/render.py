"""Markdown to HTML rendering for post bodies."""

import html
import re

import markdown
import markdown.extensions
import markdown.preprocessors

from .content import PostParseError

EXTENSIONS = ['fenced_code', 'codehilite', 'tables', 'toc']
EXTENSION_CONFIGS = {'codehilite': {'guess_lang': False}}

_FENCE_RE = re.compile(r'^\s*(`{3,}|~{3,})')
_TITLED_FENCE_RE = re.compile(
    r'^(?P<indent>\s*)(?P<fence>`{3,}|~{3,})[ ]*(?P<lang>[\w#.+-]*)[ ]+'
    r'title=(?P<quot>["\'])(?P<title>.*?)(?P=quot)[ ]*$'
)


class TitledCodePreprocessor(markdown.preprocessors.Preprocessor):
    """Turn ```lang title="file.py" fences into a caption above a plain fence.

    fenced_code does not understand the title attribute, so it is stripped from
    the fence line and emitted as a raw HTML block before the code.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        fence = ''
        for line in lines:
            m_fence = _FENCE_RE.match(line)
            if fence:
                if line.strip() == fence:
                    fence = ''
                out.append(line)
                continue

            if m_fence is None:
                out.append(line)
                continue

            fence = m_fence.group(1)
            m_title = _TITLED_FENCE_RE.match(line)
            if m_title is None:
                out.append(line)
                continue

            title = html.escape(m_title.group('title'))
            out.extend(['', f'<div class="code-title">{title}</div>', ''])
            out.append(f"{m_title.group('indent')}{fence}{m_title.group('lang')}")
        return out


class TitledCodeExtension(markdown.extensions.Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # Must run before fenced_code (priority 25)
        md.preprocessors.register(TitledCodePreprocessor(md), 'titled_code', 27)


def render(body: str) -> str:
    """Render a markdown post body to HTML.

    A new Markdown instance is used per call so that no converter state (toc ids,
    footnotes, stashed HTML) leaks between posts; the same input always yields
    the same output.
    """
    md = markdown.Markdown(
        extensions=[*EXTENSIONS, TitledCodeExtension()],
        extension_configs=EXTENSION_CONFIGS,
    )
    try:
        return md.convert(body)
    except Exception as e:
        raise PostParseError(f'Failed to render markdown: {e}') from e
