"""
Regression Engine

Ordinary least squares model of line revenue on categorical predictors:

    line_total ~ discount_applied + category + payment_method

Categorical predictors use treatment (dummy) coding. Levels are sorted
alphabetically and the first level of each factor is the reference, so
"No" is the reference for discount_applied. Terms are named
"factor[level]"; the intercept is "(Intercept)".

The fit uses the QR decomposition of the design matrix. A design that is not
of full column rank raises SingularDesignError instead of returning
arbitrary coefficients.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np
import polars as pl
from scipy import linalg, stats
import structlog

from fashion_analytics.analytics.aggregations import join_products
from fashion_analytics.exceptions import InsufficientDataError, SingularDesignError

logger = structlog.get_logger(__name__)

INTERCEPT = "(Intercept)"
RESPONSE = "line_total"
PREDICTORS = ("discount_applied", "category", "payment_method")


@dataclass(frozen=True)
class RegressionTerm:
    """Coefficient estimate of one model term"""
    term: str
    estimate: float
    std_error: float
    statistic: float
    p_value: float


@dataclass(frozen=True)
class RegressionResult:
    """Fitted OLS model"""
    terms: List[RegressionTerm]
    r_squared: float
    adj_r_squared: float
    n: int
    df_residual: int
    reference_levels: Dict[str, str] = field(default_factory=dict)

    def coefficient(self, term: str) -> RegressionTerm:
        for t in self.terms:
            if t.term == term:
                return t
        raise KeyError(term)

    def to_frame(self) -> pl.DataFrame:
        """Coefficient table in reported order"""
        return pl.DataFrame(
            [asdict(t) for t in self.terms],
            schema={
                "term": pl.Utf8,
                "estimate": pl.Float64,
                "std_error": pl.Float64,
                "statistic": pl.Float64,
                "p_value": pl.Float64,
            },
        )

    def fit_summary(self) -> pl.DataFrame:
        return pl.DataFrame({
            "r_squared": [self.r_squared],
            "adj_r_squared": [self.adj_r_squared],
            "n": [self.n],
            "df_residual": [self.df_residual],
        })


def build_design_matrix(
    df: pl.DataFrame,
    response: str,
    factors: Sequence[str],
) -> Tuple[np.ndarray, np.ndarray, List[str], Dict[str, str]]:
    """
    Dummy-coded design matrix with an intercept column.

    Args:
        df: Rows to model; must contain no nulls in response or factors
        response: Numeric response column
        factors: Categorical predictor columns

    Returns:
        (X, y, term names, reference level per factor)
    """
    columns = [np.ones(df.height)]
    names = [INTERCEPT]
    references: Dict[str, str] = {}

    for factor in factors:
        values = df[factor].cast(pl.Utf8)
        levels = sorted(values.unique().to_list())
        references[factor] = levels[0]
        for level in levels[1:]:
            columns.append((values == level).cast(pl.Float64).to_numpy())
            names.append(f"{factor}[{level}]")

    X = np.column_stack(columns)
    y = df[response].cast(pl.Float64).to_numpy()
    return X, y, names, references


def fit_ols(
    X: np.ndarray,
    y: np.ndarray,
    names: Sequence[str],
) -> Tuple[List[RegressionTerm], float, float, int]:
    """
    Least squares fit by QR decomposition.

    Returns:
        (terms in design order, r_squared, adj_r_squared, df_residual)

    Raises:
        SingularDesignError: X is rank deficient or leaves no residual
            degrees of freedom
        InsufficientDataError: the response has no variance
    """
    n, p = X.shape
    df_residual = n - p
    if df_residual <= 0:
        raise SingularDesignError(
            f"Design has {p} columns but only {n} rows; no residual degrees of freedom",
            details={"n": n, "p": p},
        )

    rank = np.linalg.matrix_rank(X)
    if rank < p:
        raise SingularDesignError(
            f"Design matrix is rank deficient (rank {rank} < {p} columns)",
            details={"rank": int(rank), "columns": list(names)},
        )

    q, r = np.linalg.qr(X)
    beta = linalg.solve_triangular(r, q.T @ y)

    residuals = y - X @ beta
    sse = float(residuals @ residuals)
    centered = y - y.mean()
    sst = float(centered @ centered)
    if sst == 0.0:
        raise InsufficientDataError(
            "Response has zero variance; R-squared is undefined",
            details={"n": n},
        )

    sigma2 = sse / df_residual
    r_inv = linalg.solve_triangular(r, np.eye(p))
    cov = sigma2 * (r_inv @ r_inv.T)
    std_errors = np.sqrt(np.clip(np.diag(cov), 0.0, None))

    with np.errstate(divide="ignore", invalid="ignore"):
        statistics = beta / std_errors
    p_values = 2 * stats.t.sf(np.abs(statistics), df_residual)

    r_squared = float(np.clip(1 - sse / sst, 0.0, 1.0))
    adj_r_squared = 1 - (1 - r_squared) * (n - 1) / df_residual

    terms = [
        RegressionTerm(
            term=name,
            estimate=float(b),
            std_error=float(se),
            statistic=float(t),
            p_value=float(pv),
        )
        for name, b, se, t, pv in zip(names, beta, std_errors, statistics, p_values)
    ]
    return terms, r_squared, float(adj_r_squared), df_residual


def fit_linear_model(
    df: pl.DataFrame,
    response: str = RESPONSE,
    factors: Sequence[str] = PREDICTORS,
) -> RegressionResult:
    """
    Fit response ~ factors by OLS and rank terms by absolute estimate.

    Rows with a null response or predictor are dropped before fitting.
    """
    model_df = df.select([response, *factors]).drop_nulls()
    dropped = df.height - model_df.height
    if dropped:
        logger.info("Rows with missing model values dropped", rows=dropped)

    if model_df.height == 0:
        raise InsufficientDataError(
            "No complete rows to fit the regression",
            details={"rows": df.height},
        )

    X, y, names, references = build_design_matrix(model_df, response, factors)
    terms, r_squared, adj_r_squared, df_residual = fit_ols(X, y, names)

    ranked = sorted(terms, key=lambda t: abs(t.estimate), reverse=True)

    logger.info(
        "Regression fitted",
        n=model_df.height,
        terms=len(ranked),
        r_squared=round(r_squared, 4),
    )

    return RegressionResult(
        terms=ranked,
        r_squared=r_squared,
        adj_r_squared=adj_r_squared,
        n=model_df.height,
        df_residual=df_residual,
        reference_levels=references,
    )


def fit_revenue_model(
    transactions: pl.DataFrame,
    products: pl.DataFrame,
    min_line_total: float = 0.0,
) -> RegressionResult:
    """
    Line revenue on discount status, product category and payment method.

    Only sales rows (line_total above min_line_total) are modelled.
    """
    sales = transactions.filter(pl.col(RESPONSE) > min_line_total)
    joined = join_products(sales, products)
    return fit_linear_model(joined, RESPONSE, PREDICTORS)
