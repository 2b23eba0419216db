"""Project-wide numeric constants for stable comparisons and epsilons.

Keep this module minimal and import-safe to avoid circular imports.
"""

# Numerical epsilon for vector normalization (used for cosine-norm stability)
NORM_EPS: float = 1e-12

# Epsilon used to avoid division by zero when summing attention masks
MASK_SUM_EPS: float = 1e-9

# Large negative value used when masking before max-pooling
MASK_NEG_INF: float = -1e9
