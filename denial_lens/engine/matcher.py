"""
Token-based similarity scoring for drug / service names.

The scorer is designed to be:
- deterministic and pure-Python
- explainable (each heuristic is isolated and commented)
- roughly aligned with IR concepts such as IDF weighting, coverage, and soft fuzziness.

Similarity is in [0, 1] where 1 means the two strings tokenize identically.
The fuzzy index turns it into a distance (``1 - similarity``).
"""

import math
import re
from collections import defaultdict
from difflib import SequenceMatcher
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

# Similarity required for two tokens to be considered matching
TOKEN_SIM_THRESHOLD = 0.8

# Soft penalty strength for extra / noisy tokens on the target side
NOISE_PENALTY_STRENGTH = 0.7  # in [0, 1]; smaller = stronger penalty

# How quickly importance decays for later tokens (earlier tokens matter more)
POSITION_DECAY = 0.3  # 0 = no decay, 1 = strong decay

# Dosage-form and filler words that should keep very small but non-zero weight
STOPWORDS = {
    "mg",
    "mcg",
    "ml",
    "tablet",
    "tablets",
    "capsule",
    "capsules",
    "injection",
    "oral",
    "solution",
    "the",
    "and",
    "of",
    "for",
}


def tokenize(text: str) -> List[str]:
    """Tokenize text into words (alphanumeric sequences), lowercased."""
    return re.findall(r"\w+", (text or "").lower())


def shift_weight(pos_a: int, pos_b: int, max_len: int) -> float:
    """
    Positional weight based on token positions.

    Earlier tokens and aligned order should get slightly higher impact,
    but order mismatches should reduce the score smoothly instead of harshly.
    """
    if max_len <= 0:
        return 1.0
    base = max(0.0, 1.0 - abs(pos_a - pos_b) / max_len)
    # Compressed to 0.5..1.0 so that misordered tokens still contribute.
    return 0.5 + 0.5 * base


def compute_document_frequencies(
    documents: Sequence[Sequence[str]],
) -> Tuple[Dict[str, int], int]:
    """
    Compute document frequency df(token) over tokenized documents.

    Each document contributes at most 1 to a token's df, regardless of
    how many times it appears in that document. Empty documents are not
    counted.
    """
    df: Dict[str, int] = defaultdict(int)
    doc_count = 0

    for tokens in documents:
        if not tokens:
            continue
        doc_count += 1
        for t in set(tokens):
            df[t] += 1

    return dict(df), doc_count


def token_idf(token: str, df: Dict[str, int], doc_count: int) -> float:
    """
    IDF-style weight for a token.

    Smooth formulation ``idf = log(1 + N / df)`` where N is the number of
    documents that have at least one token. Tokens never seen in the
    documents are treated as having df = 1.

    Stopwords get a strongly reduced but non-zero weight so they never dominate.
    """
    if doc_count <= 0:
        return 1.0

    df_t = df.get(token, 1)
    base_idf = math.log(1.0 + doc_count / df_t)

    if token in STOPWORDS:
        return max(base_idf * 0.1, 0.01)

    return base_idf


def _token_position_weight(index: int, length: int) -> float:
    """Weight earlier tokens slightly more than later tokens."""
    if length <= 1 or POSITION_DECAY <= 0:
        return 1.0
    rel_pos = index / (length - 1)  # 0 for first token, 1 for last
    return 1.0 - POSITION_DECAY * rel_pos


@lru_cache(maxsize=10_000)
def token_similarity(a: str, b: str) -> float:
    """
    Soft character-level similarity between two tokens.

    - Exact match -> 1.0
    - Prefix/substring matches are boosted
    - General fuzziness via SequenceMatcher ratio
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    if a.startswith(b) or b.startswith(a) or a in b or b in a:
        return 0.9

    # If token lengths differ too much, they cannot reach high similarity.
    max_len = max(len(a), len(b))
    length_diff = abs(len(a) - len(b))
    if (max_len - length_diff) / max_len < TOKEN_SIM_THRESHOLD:
        return 0.0

    sim = SequenceMatcher(None, a, b).ratio()
    return max(0.0, min(1.0, sim))


def _directional_similarity(
    source_tokens: Sequence[str],
    target_tokens: Sequence[str],
    df: Dict[str, int],
    doc_count: int,
) -> float:
    """
    Compute coverage-based similarity from source -> target.

    - For each source token we find the best-matching target token (if any)
    - Contribution is IDF-weighted and scaled by both token similarity and position
    - Coverage = matched_weight / total_weight
    - A soft noise penalty is applied for unmatched tokens on the target side
    """
    if not source_tokens or not target_tokens:
        return 0.0

    src_len = len(source_tokens)
    tgt_len = len(target_tokens)

    src_token_weights: List[float] = [
        token_idf(tok, df, doc_count) * _token_position_weight(i, src_len)
        for i, tok in enumerate(source_tokens)
    ]

    total_weight = sum(src_token_weights)
    if total_weight <= 0:
        return 0.0

    used_target_indices = set()
    matched_weight = 0.0

    for i, (src_tok, base_weight) in enumerate(zip(source_tokens, src_token_weights)):
        best_idx = None
        best_contrib = 0.0

        for j, tgt_tok in enumerate(target_tokens):
            sim = token_similarity(src_tok, tgt_tok)
            if sim < TOKEN_SIM_THRESHOLD:
                continue

            #  - sim in [0.8, 1]
            #  - pos_align in [0.5, 1]
            combined = sim * shift_weight(i, j, max(src_len, tgt_len))

            if combined > best_contrib:
                best_contrib = combined
                best_idx = j

        if best_idx is not None:
            used_target_indices.add(best_idx)
            matched_weight += base_weight * best_contrib

    coverage = matched_weight / total_weight

    noise_penalty = 1.0
    if NOISE_PENALTY_STRENGTH > 0 and matched_weight > 0:
        total_extra = sum(
            token_idf(tok, df, doc_count) * _token_position_weight(j, tgt_len)
            for j, tok in enumerate(target_tokens)
            if j not in used_target_indices
        )

        if total_extra > 0:
            noise_ratio = total_extra / (matched_weight + total_extra)
            # Squared length ratio: a short source inside a long target is
            # barely penalised for the target's unmatched tail.
            length_ratio = src_len / (src_len + tgt_len)
            effective_noise = noise_ratio * (length_ratio ** 2)
            noise_penalty = 1.0 - NOISE_PENALTY_STRENGTH * effective_noise

    return max(0.0, min(1.0, coverage * noise_penalty))


def similarity(
    query_tokens: Sequence[str],
    text_tokens: Sequence[str],
    df: Dict[str, int],
    doc_count: int,
) -> float:
    """
    Symmetric, coverage-aware similarity between two tokenized strings.

    Both directions are computed:
      - query -> text : how well the query is covered by the text
      - text -> query : how well the text is covered by the query

    and combined with a length-aware weighting that emphasizes the
    better-covered (typically shorter) side, so "Humira" stays close to
    "Humira Pen" while unrelated names stay near 0.

    Returns:
        Similarity in [0, 1]; 1.0 for identical token sequences.
    """
    if not query_tokens or not text_tokens:
        return 0.0

    forward = _directional_similarity(query_tokens, text_tokens, df, doc_count)
    backward = _directional_similarity(text_tokens, query_tokens, df, doc_count)

    min_len = min(len(query_tokens), len(text_tokens))
    max_len = max(len(query_tokens), len(text_tokens))
    length_ratio = min_len / max_len

    short_side_score = max(forward, backward)
    long_side_score = min(forward, backward)

    # Weight for the shorter side is in [0.85, 1.0]
    alpha = 0.85 + 0.15 * length_ratio
    beta = 1.0 - alpha

    score = alpha * short_side_score + beta * long_side_score
    return max(0.0, min(1.0, score))
