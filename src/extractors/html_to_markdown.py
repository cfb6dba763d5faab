"""
Conversión reutilizable de HTML a Markdown.

Recorre un árbol de BeautifulSoup y genera Markdown para los elementos
estructurales de un artículo (títulos, párrafos, énfasis, enlaces, listas,
citas, código e imágenes). El marcado de presentación se descarta y se
conserva su texto.
"""

import re
from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag


BLOCK_TAGS = {'p', 'div', 'section', 'article', 'header', 'main', 'figure', 'figcaption', 'table', 'tr'}
HEADING_LEVELS = {'h1': 1, 'h2': 2, 'h3': 3, 'h4': 4, 'h5': 5, 'h6': 6}


def normalize_inline_spaces(text):
    """Colapsa espacios repetidos y quita los espacios antes de la puntuación de cierre."""
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r' +([.,;:!?\)])', r'\1', text)
    text = re.sub(r'\( +', r'(', text)
    return text


def _wrap(marker, text):
    """Envuelve el texto en un marcador inline, dejando los espacios de los bordes fuera."""
    stripped = text.strip()
    if not stripped:
        return text
    leading = ' ' if text[:1].isspace() else ''
    trailing = ' ' if text[-1:].isspace() else ''
    return f"{leading}{marker}{stripped}{marker}{trailing}"


def process_inline(element):
    """Procesa formato inline (negritas, enlaces, énfasis)."""
    return _inline_nodes(element.children)


def _inline_nodes(nodes):
    parts = []
    for child in nodes:
        if isinstance(child, (Comment, Doctype)):
            continue
        if isinstance(child, NavigableString):
            # Solo <br> produce un salto de línea forzado
            parts.append(re.sub(r'\s+', ' ', str(child)))
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name
        if name in ('strong', 'b'):
            parts.append(_wrap('**', process_inline(child)))
        elif name in ('em', 'i'):
            parts.append(_wrap('*', process_inline(child)))
        elif name == 'code':
            parts.append(f"`{child.get_text()}`")
        elif name == 'a':
            text = process_inline(child).strip()
            href = child.get('href', '')
            if text and href:
                parts.append(f"[{text}]({href})")
            elif text:
                parts.append(text)
        elif name == 'img':
            src = child.get('src', '')
            if src:
                parts.append(f"![{child.get('alt', '')}]({src})")
        elif name == 'br':
            parts.append('  \n')
        else:
            parts.append(process_inline(child))

    return ''.join(parts)


def _inline_block(element):
    lines = process_inline(element).split('  \n')
    return '  \n'.join(normalize_inline_spaces(line).strip() for line in lines).strip()


def _list_items(element, depth):
    ordered = element.name == 'ol'
    lines = []
    index = 1
    for item in element.find_all('li', recursive=False):
        nested = [child.extract() for child in item.find_all(['ul', 'ol'], recursive=False)]
        marker = f"{index}." if ordered else '-'
        text = _inline_block(item)
        if text:
            lines.append(f"{'  ' * depth}{marker} {text}")
            index += 1
        for sub_list in nested:
            lines.extend(_list_items(sub_list, depth + 1))
    return lines


STRUCTURAL_TAGS = list(BLOCK_TAGS) + list(HEADING_LEVELS) + ['ul', 'ol', 'blockquote', 'pre', 'hr']


def _is_block(node):
    if not isinstance(node, Tag):
        return False
    return node.name in STRUCTURAL_TAGS or node.find(STRUCTURAL_TAGS) is not None


def _flush_inline(run, parts):
    lines = _inline_nodes(run).split('  \n')
    text = '  \n'.join(normalize_inline_spaces(line).strip() for line in lines).strip()
    if text:
        parts.append(text)
    run.clear()


def convert_element(element, parts):
    """Agrega a `parts` los bloques Markdown de `element`."""
    run = []
    for child in element.children:
        if isinstance(child, Tag) and child.name in ('script', 'style', 'noscript'):
            continue
        if not _is_block(child):
            if isinstance(child, (NavigableString, Tag)):
                run.append(child)
            continue

        _flush_inline(run, parts)
        name = child.name
        if name in HEADING_LEVELS:
            text = _inline_block(child)
            if text:
                parts.append(f"{'#' * HEADING_LEVELS[name]} {text}")
        elif name == 'p':
            text = _inline_block(child)
            if text:
                parts.append(text)
        elif name in ('ul', 'ol'):
            lines = _list_items(child, 0)
            if lines:
                parts.append('\n'.join(lines))
        elif name == 'blockquote':
            inner = []
            convert_element(child, inner)
            if inner:
                quoted = '\n\n'.join(inner)
                parts.append('\n'.join(f"> {line}" if line else '>' for line in quoted.split('\n')))
        elif name == 'pre':
            parts.append(f"```\n{child.get_text().strip(chr(10))}\n```")
        elif name == 'hr':
            parts.append('---')
        else:
            convert_element(child, parts)

    _flush_inline(run, parts)


def convert(html):
    """
    Convierte un fragmento HTML a Markdown.

    Args:
        html: String HTML

    Returns:
        str: Texto Markdown, bloques separados por una línea en blanco
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, 'lxml')
    root = soup.body or soup
    parts = []
    convert_element(root, parts)

    content = "\n\n".join(parts)
    content = re.sub(r'\n{3,}', '\n\n', content)
    return content.strip()
