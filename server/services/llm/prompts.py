"""Prompt templates. The corpus is German, so are the prompts."""

from typing import Sequence

from retrieval.types import Lecture, SearchResult

ANALYSIS_MAX_TOKENS = {
    "allgemein": 2000,
    "genau": 3500,
    "ausführlich": 6000,
}
ANALYSIS_DEFAULT_MAX_TOKENS = 8192

# ~4 characters per token
CHARS_PER_TOKEN = 4
SUMMARY_TOKEN_LIMIT = 180_000
SUMMARY_HALF_WINDOW_CHARS = 360_000
OMISSION_MARKER = "\n\n[... Mittlerer Teil des Vortrags ausgelassen ...]\n\n"


def analysis_max_tokens(depth: str) -> int:
    return ANALYSIS_MAX_TOKENS.get(depth, ANALYSIS_DEFAULT_MAX_TOKENS)


def analysis_prompt(query: str, results: Sequence[SearchResult], depth: str) -> str:
    context = "\n\n---\n\n".join(
        f"[{r.passage.id}:{r.passage.index}] {r.passage.file_name or r.passage.title}\n{r.passage.content}"
        for r in results
    )
    refs = ", ".join(f"{r.passage.id}:{r.passage.index}" for r in results)
    return f"""Analysieren Sie die folgenden Textstellen aus Rudolf Steiners Werk zur Frage: "{query}"

ANALYSE-TIEFE: {depth}

QUELLENANGABEN:
- Verwenden Sie das Format GA###/##:index nach jeder spezifischen Aussage
- Verfügbare Referenzen: {refs}
- Format: GA###/##:index (z.B. GA052/7:n5x6ru)
- WICHTIG: Verwenden Sie immer das vollständige Format mit :index
- Beispiel: "Steiner kritisiert Kants Erkenntnisgrenze (GA052/7:n5x6ru)."

ANWEISUNGEN:
- Arbeiten Sie nur mit den gegebenen Textpassagen
- Fassen Sie thematische Verbindungen zusammen
- Strukturieren Sie nach wichtigsten Aspekten
- Verwenden Sie die vollständigen Referenzen GA###/##:index für jede spezifische Aussage

TEXTPASSAGEN:
{context}

ANALYSE:"""


def lecture_text(lecture: Lecture) -> str:
    """Paragraphs tagged with their index markers; empty paragraphs dropped."""
    parts = []
    for pos, p in enumerate(lecture.paragraphs):
        if not p.content.strip():
            continue
        index = p.index or f"para_{pos}"
        parts.append(f"[Index: {index}]\n{p.content}")
    return "\n\n".join(parts)


def fit_lecture_text(text: str) -> tuple:
    """
    Returns (text, headings_enabled).

    Lectures above the token limit are cut to their head and tail, and no
    headings are requested for them.
    """
    if len(text) / CHARS_PER_TOKEN <= SUMMARY_TOKEN_LIMIT:
        return text, True
    return (
        text[:SUMMARY_HALF_WINDOW_CHARS] + OMISSION_MARKER + text[-SUMMARY_HALF_WINDOW_CHARS:],
        False,
    )


_HEADINGS_TASK = """2. Erstelle eine hierarchische Gliederung mit:
   - 3-6 HAUPTÜBERSCHRIFTEN (H3) für die großen thematischen Abschnitte
   - Jeweils 2-4 UNTERÜBERSCHRIFTEN (H4) pro Hauptabschnitt für Unterabschnitte
3. Ordne jede Überschrift einem Absatz-Index zu

WICHTIG ZUR INDEX-ZUORDNUNG:
- Jeder Absatz im Text ist markiert mit [Index: XXXXX] (z.B. [Index: ^1e6ps7])
- Verwende EXAKT diesen Index in deiner Antwort
- Der Index gibt an, VOR welchem Absatz die Überschrift eingefügt wird
- Die Überschrift leitet den FOLGENDEN Abschnitt ein
- Überschriften sollten gleichmäßig über den Vortrag verteilt sein
- H4-Überschriften folgen logisch unter ihren H3-Hauptüberschriften"""

_HEADINGS_FORMAT = """,
  "headings": [
    {"index": "^1e6ps7", "text": "Die griechische Philosophie", "level": "h3"},
    {"index": "^1e6ps7", "text": "Die Sophistik und die Wendung zum Menschen", "level": "h4"},
    {"index": "^8k2mw9", "text": "Platon und Aristoteles", "level": "h3"}
  ]"""

_NO_HEADINGS_FORMAT = """,
  "headings": []"""


def summary_prompt(lecture: Lecture, text: str, headings_enabled: bool) -> str:
    meta = [f"VORTRAG: {lecture.display_title}"]
    if lecture.location:
        meta.append(f"ORT: {lecture.location}")
    if lecture.date:
        meta.append(f"DATUM: {lecture.date}")

    if headings_enabled:
        rules = (
            "- Verwende die EXAKTEN Index-Strings aus dem Text (mit ^ am Anfang)\n"
            "- Setze für Hauptüberschriften \"level\": \"h3\" und für Unterüberschriften \"level\": \"h4\""
        )
    else:
        rules = (
            "- Gib ein leeres headings-Array zurück: \"headings\": []\n"
            "- Aufgrund der Länge des Vortrags werden KEINE Zwischenüberschriften generiert"
        )

    what = "eine Zusammenfassung und Zwischenüberschriften" if headings_enabled else "eine Zusammenfassung"
    task = _HEADINGS_TASK if headings_enabled else ""
    output_tail = _HEADINGS_FORMAT if headings_enabled else _NO_HEADINGS_FORMAT
    header = "\n".join(meta)

    return f"""Erstelle {what} für diesen Vortrag von Rudolf Steiner.

{header}

Der Vortrag hat {len(lecture.paragraphs)} Absätze.

AUFGABE:
1. Schreibe eine prägnante ZUSAMMENFASSUNG (100-150 Wörter) der Kernaussagen
{task}

AUSGABEFORMAT (als JSON):
{{
  "summary": "Deine Zusammenfassung in 100-150 Wörtern"{output_tail}
}}

WICHTIG:
- Gib NUR das JSON zurück, keinen anderen Text
{rules}

VORTRAG-TEXT:
{text}

AUSGABE (JSON):"""
