"""
Offline search over the corpus files, without the API server.

Usage:
    python -m server.cli --data-dir data "Kant und die Erkenntnistheorie"
    python -m server.cli --data-dir data --thematic "Wie ist das Verhältnis von Denken und Wahrnehmung?"
    python -m server.cli --data-dir data --fulltext Denken Wahrnehmung --proximity 2
"""

import argparse
import logging
import sys
from pathlib import Path

from retrieval.fulltext import fulltext_search
from retrieval.keyword import keyword_search
from retrieval.rerank import semantic_rerank
from retrieval.thematic import thematic_search
from server.corpus import CorpusLoadError, load_lectures, load_passages, load_synonyms
from server.storage import JsonStore


def _snippet(text: str, size: int = 300) -> str:
    snippet = text[:size].replace('\n', ' ')
    return snippet + '...' if len(text) > size else snippet


def run_search(args) -> int:
    try:
        passages = load_passages(args.data_dir)
    except CorpusLoadError as e:
        print(f"Error: {e}")
        return 1
    synonyms = load_synonyms(JsonStore(args.data_dir), args.synonyms)

    search = thematic_search if args.thematic else keyword_search
    hits = search(args.query, passages, synonyms)
    results = semantic_rerank(hits, args.query)[:args.limit]

    if not results:
        print("  No results found.")
        return 0

    print(f"\n  Top {len(results)} of {len(hits)} results:")
    print("-" * 70)
    for i, r in enumerate(results, 1):
        p = r.passage
        print(f"\n  [{i}] final={r.final_score:.2f} keyword={r.keyword_score:g}  {p.id}:{p.index}")
        print(f"      {p.file_name or p.title}  terms: {', '.join(r.matched_terms[:5])}")
        print(f"      {_snippet(p.content)}")
    print("-" * 70)
    return 0


def run_fulltext(args) -> int:
    lectures = load_lectures(args.data_dir)
    if not lectures:
        print("Error: no full lectures available")
        return 1
    word1 = args.fulltext[0]
    word2 = args.fulltext[1] if len(args.fulltext) > 1 else None
    matches = fulltext_search(lectures.values(), word1, word2, args.proximity)

    print(f"\n  {len(matches)} paragraphs")
    print("-" * 70)
    for m in matches[:args.limit]:
        flags = ('1' if m.has_word1 else '-') + ('2' if m.has_word2 else '-')
        print(f"\n  {m.lecture.id} #{m.paragraph_index} [{flags}] {m.lecture.title}")
        print(f"      {_snippet(m.paragraph.content)}")
    print("-" * 70)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline lecture corpus search.")
    parser.add_argument('query', nargs='?', help="Search query")
    parser.add_argument('--data-dir', '-d', type=Path, default=Path('data'),
                        help="Directory with steiner-*.json files (default: data)")
    parser.add_argument('--synonyms', default='synonyms.json',
                        help="Synonym file name inside the data directory")
    parser.add_argument('--thematic', action='store_true',
                        help="Split the query into key terms and merge their hits")
    parser.add_argument('--fulltext', nargs='+', metavar='WORD',
                        help="Literal paragraph search for one or two words")
    parser.add_argument('--proximity', type=int, default=None,
                        help="Max paragraph distance between the two full-text words")
    parser.add_argument('--limit', '-n', type=int, default=10,
                        help="Number of results to print (default: 10)")
    parser.add_argument('--verbose', '-v', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.fulltext:
        if len(args.fulltext) > 2:
            parser.error("--fulltext takes one or two words")
        return run_fulltext(args)
    if not args.query:
        parser.error("a query is required unless --fulltext is given")
    return run_search(args)


if __name__ == '__main__':
    sys.exit(main())
