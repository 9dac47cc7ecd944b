from .core import FALLBACK_LANG, TARGET_LANG, UNKNOWN_MARKER

TYPE_NAMES = {
    'normal': 'ノーマル',
    'fire': 'ほのお',
    'water': 'みず',
    'electric': 'でんき',
    'grass': 'くさ',
    'ice': 'こおり',
    'fighting': 'かくとう',
    'poison': 'どく',
    'ground': 'じめん',
    'flying': 'ひこう',
    'psychic': 'エスパー',
    'bug': 'むし',
    'rock': 'いわ',
    'ghost': 'ゴースト',
    'dragon': 'ドラゴン',
    'dark': 'あく',
    'steel': 'はがね',
    'fairy': 'フェアリー',
}

ABILITY_NAMES = {
    'overgrow': 'しんりょく',
    'chlorophyll': 'ようりょくそ',
    'blaze': 'もうか',
    'solar-power': 'サンパワー',
    'torrent': 'げきりゅう',
    'rain-dish': 'あめうけざら',
    'static': 'せいでんき',
    'lightning-rod': 'ひらいしん',
}

STAT_NAMES = {
    'hp': 'HP',
    'attack': 'こうげき',
    'defense': 'ぼうぎょ',
    'special-attack': 'とくこう',
    'special-defense': 'とくぼう',
    'speed': 'すばやさ',
}

HABITAT_NAMES = {
    'cave': '洞窟',
    'forest': '森',
    'grassland': '草原',
    'mountain': '山',
    'rare': '珍しい',
    'rough-terrain': '荒地',
    'sea': '海',
    'urban': '都会',
    'waters-edge': '水辺',
}

COLOR_NAMES = {
    'black': '黒',
    'blue': '青',
    'brown': '茶',
    'gray': '灰',
    'green': '緑',
    'pink': 'ピンク',
    'purple': '紫',
    'red': '赤',
    'white': '白',
    'yellow': '黄',
}

SHAPE_NAMES = {
    'ball': 'ボール型',
    'squid': 'イカ型',
    'fish': '魚型',
    'arms': '手足型',
    'blob': '塊',
    'upright': '直立型',
    'quadruped': '四足型',
    'wings': '翼型',
    'tentacles': '触手型',
    'heads': '頭型',
    'humanoid': '人型',
    'bug-wings': '昆虫の羽型',
    'armor': '鎧型',
}


def translate_type(name: str) -> str:
    return TYPE_NAMES.get(name, name)


def translate_ability(name: str) -> str:
    return ABILITY_NAMES.get(name, name)


def translate_stat(name: str) -> str:
    return STAT_NAMES.get(name, name)


def translate_habitat(name) -> str:
    return HABITAT_NAMES.get(name, UNKNOWN_MARKER)


def translate_color(name) -> str:
    return COLOR_NAMES.get(name, UNKNOWN_MARKER)


def translate_shape(name) -> str:
    return SHAPE_NAMES.get(name, UNKNOWN_MARKER)


def pick_localized_name(names, lang: str = TARGET_LANG, fallback_lang: str = FALLBACK_LANG, default=None):
    """Pick the display name for `lang` from an upstream `names` array.
    Exact language match first, then the regional dialect code, else `default`.
    """
    by_lang = {}
    for entry in names or []:
        nm = entry.get('name')
        lang_code = (entry.get('language') or {}).get('name')
        if nm and lang_code and lang_code not in by_lang:
            by_lang[lang_code] = nm
    return by_lang.get(lang) or (fallback_lang and by_lang.get(fallback_lang)) or default
