"""Regenerate the offline snapshot used by the API (id -> names -> number).

Walks the upstream /pokemon listing once, resolves each species' Japanese
name and adds the first mega form of a species under the base number.
Run offline, never at request time:

    python -m scripts.update_snapshot --output pokemonData.json --limit 1500

from the repository root (or anywhere after `pip install -e .`).
"""
import argparse
import json
import logging
import sys
import time
from pathlib import Path

from services.errors import PokedexError
from services.locale import pick_localized_name
from services.upstream import UpstreamClient

logger = logging.getLogger('update_snapshot')

MEGA_PREFIX = 'メガ'


def build_snapshot(client: UpstreamClient, limit: int, delay: float = 0.05) -> list:
    _, items = client.list_entities(0, limit)
    entries = []
    seen_mega_numbers = set()
    total = len(items)
    for done, item in enumerate(items, start=1):
        try:
            detail = client.get_pokemon(item.entity_id)
            species = client.get_species(detail['species']['url'])
        except (PokedexError, KeyError, TypeError, ValueError) as e:
            logger.warning('Skipping %s: %s', item.display_key, e)
            continue
        ja_name = pick_localized_name(species.get('names'), 'ja-Hrkt', 'ja', default=item.display_key)
        number = str(detail['id']).zfill(3)
        entries.append({
            'id': str(detail['id']),
            'name_en': item.display_key,
            'name_ja': ja_name,
            'number': number,
        })

        megas = [
            v for v in species.get('varieties') or []
            if '-mega' in ((v.get('pokemon') or {}).get('name') or '')
        ]
        # one mega form per species, sharing the base number
        if megas and number not in seen_mega_numbers:
            mega = megas[0]['pokemon']
            try:
                mega_detail = client.fetch_json(mega['url'])
            except PokedexError as e:
                logger.warning('Skipping mega form %s: %s', mega.get('name'), e)
            else:
                entries.append({
                    'id': str(mega_detail['id']),
                    'name_en': mega['name'],
                    'name_ja': f"{MEGA_PREFIX}{ja_name}",
                    'number': number,
                })
                seen_mega_numbers.add(number)

        logger.info('Processed %d/%d (%d%%)', done, total, done * 100 // total)
        if delay:
            time.sleep(delay)
    return entries


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--output', default='pokemonData.json')
    parser.add_argument('--limit', type=int, default=1500)
    parser.add_argument('--delay', type=float, default=0.05, help='seconds between entities')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s')
    try:
        entries = build_snapshot(UpstreamClient(), args.limit, args.delay)
    except PokedexError as e:
        logger.error('Snapshot generation failed: %s', e)
        return 1
    out = Path(args.output)
    out.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding='utf-8')
    logger.info('Wrote %d entries to %s', len(entries), out.resolve())
    return 0


if __name__ == '__main__':
    sys.exit(main())
