from person_resolver.biography.inference import KeywordBiographer, load_biography_map

__all__ = [
    "KeywordBiographer",
    "load_biography_map",
]
