"""
Chart service for the accounting dashboard.

Renders the asset composition and income/expense performance charts as PNG.
"""

import io
import logging

import matplotlib
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.ticker import FuncFormatter

from coopledger.config import CHART_DPI, CHART_FORMAT, CHART_HEIGHT, CHART_WIDTH

from .statements import BalanceSheet, IncomeStatement

# Non-interactive backend; charts are only written to buffers
matplotlib.use("Agg")

logger = logging.getLogger(__name__)

COLORS = {
    "cash": "#10b981",  # Emerald
    "loans": "#3b82f6",  # Blue
    "income": "#2ecc71",  # Green
    "expense": "#e74c3c",  # Red
}


class ChartService:
    """Service for generating dashboard charts."""

    def __init__(self):
        try:
            sns.set_theme(style="whitegrid")
            logger.info("ChartService initialized successfully")
        except Exception as e:
            logger.warning(f"Failed to set seaborn theme: {e}")

    @staticmethod
    def _save(fig) -> io.BytesIO:
        buf = io.BytesIO()
        fig.savefig(buf, format=CHART_FORMAT, dpi=CHART_DPI, bbox_inches="tight")
        buf.seek(0)
        return buf

    def asset_composition_chart(self, sheet: BalanceSheet) -> io.BytesIO:
        """
        Pie chart of cash & bank versus loans receivable.

        Args:
            sheet: Balance sheet to chart

        Returns:
            BytesIO buffer containing the PNG image
        """
        if sheet is None:
            raise ValueError("sheet cannot be None")

        fig = None
        try:
            df = pd.DataFrame(
                {
                    "name": ["Cash & Bank", "Loans Receivable"],
                    "value": [sheet.cash_assets, sheet.loans_receivable],
                }
            )
            # A pie cannot show negative or all-zero slices
            df = df[df["value"] > 0]

            fig, ax = plt.subplots(figsize=(CHART_WIDTH, CHART_HEIGHT))
            if df.empty:
                ax.text(
                    0.5,
                    0.5,
                    "No asset data available",
                    ha="center",
                    va="center",
                    fontsize=14,
                )
                ax.set_axis_off()
            else:
                palette = [
                    COLORS["cash"] if n == "Cash & Bank" else COLORS["loans"]
                    for n in df["name"]
                ]
                ax.pie(
                    df["value"],
                    labels=df["name"],
                    colors=palette,
                    autopct="%1.1f%%",
                    startangle=90,
                    wedgeprops={"width": 0.45},
                )
                ax.axis("equal")

            ax.set_title("Asset Composition", fontsize=14, fontweight="bold")

            buf = self._save(fig)
            logger.debug("Generated asset composition chart")
            return buf
        except Exception as e:
            logger.error(
                f"Error generating asset composition chart: {e}", exc_info=True
            )
            raise
        finally:
            if fig is not None:
                plt.close(fig)

    def performance_chart(self, income: IncomeStatement) -> io.BytesIO:
        """
        Bar chart of current-period income against expenses.

        Args:
            income: Income statement to chart

        Returns:
            BytesIO buffer containing the PNG image
        """
        if income is None:
            raise ValueError("income cannot be None")

        fig = None
        try:
            df = pd.DataFrame(
                {
                    "Kind": ["Income", "Expense"],
                    "Amount": [income.revenue, income.expenses],
                }
            )

            fig, ax = plt.subplots(figsize=(CHART_WIDTH, CHART_HEIGHT))
            sns.barplot(
                data=df,
                x="Kind",
                y="Amount",
                hue="Kind",
                palette=[COLORS["income"], COLORS["expense"]],
                legend=False,
                ax=ax,
            )
            ax.axhline(y=0, color="black", linewidth=0.8)
            ax.set_title(
                f"Current Period (net {income.net_profit:,.0f})",
                fontsize=14,
                fontweight="bold",
            )
            ax.set_xlabel("")
            ax.set_ylabel("Amount", fontsize=11)
            ax.yaxis.set_major_formatter(FuncFormatter(lambda x, p: f"{x:,.0f}"))

            buf = self._save(fig)
            logger.debug("Generated performance chart")
            return buf
        except Exception as e:
            logger.error(f"Error generating performance chart: {e}", exc_info=True)
            raise
        finally:
            if fig is not None:
                plt.close(fig)
