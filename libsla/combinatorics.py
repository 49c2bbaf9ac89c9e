"""
Combinations and permutations for libsla.

Both generators are stateless functions: the caller keeps the current
selection or counter and passes it back to obtain the next one.
"""

from typing import List, Sequence, Tuple

from .constants import CPS_OK, CPS_NO_MORE, CPS_INVALID_ARG


def combn(nsel: int, ncand: int, selection: Sequence[int]) -> Tuple[List[int], int]:
    """
    Generate the next combination, a subset of a specified size chosen
    from a specified number of items.

    Args:
        nsel: Number of items (subset size)
        ncand: Number of candidates (set size)
        selection: Latest combination, 1-based item numbers in ascending
            order; a first element below 1 requests the first combination

    Returns:
        Tuple[List[int], int]: (selection, status) where status is
        CPS_OK, CPS_NO_MORE (no more combinations; the first one is
        returned) or CPS_INVALID_ARG (nsel or ncand out of range, the
        selection is returned unchanged)

    Note:
        Combinations are generated in colexicographic order: the first
        item varies fastest.

    Examples:
        >>> combn(2, 3, [0, 0])
        ([1, 2], 0)
        >>> combn(2, 3, [1, 2])
        ([1, 3], 0)
    """
    result = list(selection)
    if nsel < 1 or ncand < 1 or nsel > ncand or len(result) < nsel:
        return result, CPS_INVALID_ARG

    first = list(range(1, nsel + 1))
    if result[0] < 1:
        return first + result[nsel:], CPS_OK

    i = 1
    while True:
        current = result[i - 1]
        # Ceiling for this item: the next item, or one beyond the last candidate
        nmax = ncand + 1 if i >= nsel else result[i]
        if nmax - current > 1:
            result[i - 1] = current + 1
            result[: i - 1] = range(1, i)
            return result, CPS_OK
        if i >= nsel:
            return first + result[nsel:], CPS_NO_MORE
        i += 1


def permut(n: int, state: Sequence[int]) -> Tuple[List[int], List[int], int]:
    """
    Generate the next permutation of a specified number of items.

    Args:
        n: Number of items (at least 1)
        state: Permutation counter of length n, as returned by the
            previous call; a negative first element requests the first
            permutation

    Returns:
        Tuple[List[int], List[int], int]: (state, order, status)
            - state: Updated counter, to be passed to the next call
            - order: The permutation, 1-based item numbers
            - status: CPS_OK, CPS_NO_MORE (the sequence has wrapped round
              to the first permutation) or CPS_INVALID_ARG (n < 1)

    Note:
        The counter is a mixed-radix number whose digit k runs from 0 to
        k. Permutations are generated with the largest item moving first.
    """
    if n < 1:
        return list(state), [], CPS_INVALID_ARG

    counter = list(state[:n])
    if counter[0] < 0:
        counter = [-1] + [0] * (n - 1)

    # Increment the counter, propagating carries
    counter[0] += 1
    status = CPS_OK
    for j in range(1, n + 1):
        if counter[j - 1] >= j:
            counter[j - 1] = 0
            if j >= n:
                status = CPS_NO_MORE
            else:
                counter[j] += 1

    # Translate the counter into the permutation
    order = [1] * n
    for item in range(n, 1, -1):
        slot = 0
        for _ in range(counter[item - 1] + 1):
            slot += 1
            while order[slot - 1] > 1:
                slot += 1
        order[slot - 1] = item

    return counter, order, status
