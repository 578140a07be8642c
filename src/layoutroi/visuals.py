"""Optional chart output for a finished ROI calculation."""

from __future__ import annotations

import io
import logging
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

try:  # pragma: no cover - optional dependency
    import matplotlib

    matplotlib.use("Agg")  # Ensure headless operation on CI/servers.
    import matplotlib.pyplot as plt
    from matplotlib.ticker import StrMethodFormatter
except Exception:  # pragma: no cover - matplotlib unavailable or misconfigured
    plt = None  # type: ignore
    StrMethodFormatter = None  # type: ignore

from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .models import SessionState

logger = logging.getLogger(__name__)

TRADITIONAL_COLOR = "#C44E52"
DEVICE_COLOR = "#4C72B0"
RENTAL_COLOR = "#55A868"


@dataclass
class _ChartRecord:
    """Metadata captured for PDF bundling."""

    title: str
    caption: str
    image_bytes: bytes


def _currency_formatter() -> Optional[StrMethodFormatter]:
    if StrMethodFormatter is None:
        return None
    return StrMethodFormatter("${x:,.0f}")


def _write_figure(
    fig: "plt.Figure",
    base_name: str,
    output_dir: Path,
    *,
    save_png: bool,
    save_pdf: bool,
    dpi: int = 140,
) -> Tuple[List[Path], bytes]:
    output_dir.mkdir(parents=True, exist_ok=True)
    created: List[Path] = []
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=dpi, bbox_inches="tight")
    png_bytes = buffer.getvalue()
    if save_png:
        png_path = output_dir / f"{base_name}.png"
        with open(png_path, "wb") as handle:
            handle.write(png_bytes)
        created.append(png_path)
    if save_pdf:
        pdf_path = output_dir / f"{base_name}.pdf"
        fig.savefig(pdf_path, format="pdf", bbox_inches="tight")
        created.append(pdf_path)
    plt.close(fig)
    return created, png_bytes


def _bundle_pdf(pdf_path: Path, entries: List[_ChartRecord]) -> None:
    c = canvas.Canvas(str(pdf_path), pagesize=landscape(letter))
    page_width, page_height = landscape(letter)
    margin = 36
    text_width = page_width - 2 * margin
    image_height = page_height - 2 * margin - 32
    for entry in entries:
        c.setFont("Helvetica-Bold", 16)
        c.drawString(margin, page_height - margin + 4, entry.title)
        image = ImageReader(io.BytesIO(entry.image_bytes))
        img_width, img_height = image.getSize()
        scale = min(text_width / img_width, image_height / img_height)
        draw_width = img_width * scale
        draw_height = img_height * scale
        x = (page_width - draw_width) / 2
        y = margin + 24
        c.drawImage(image, x, y, width=draw_width, height=draw_height, preserveAspectRatio=True, mask="auto")
        c.setFont("Helvetica", 10)
        text_y = margin
        for line in textwrap.wrap(entry.caption, width=110) or [entry.caption]:
            c.drawString(margin, text_y, line)
            text_y -= 12
        c.showPage()
    c.save()


def emit_charts(
    state: SessionState,
    output_dir: str | Path,
    *,
    format: str = "png",
    bundle_pdf: bool = True,
) -> Dict[str, object]:
    """Emit the cumulative cost chart and the cost-comparison bar chart."""

    roi = state.roi
    if plt is None:
        return {"charts": [], "pdf": None, "skipped": ["matplotlib not available"]}
    if roi is None:
        return {"charts": [], "pdf": None, "skipped": ["no calculation available"]}

    target_dir = Path(output_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    fmt = (format or "png").lower()
    save_png = fmt in {"png", "both"}
    save_pdf = fmt in {"pdf", "both"}
    if not (save_png or save_pdf):
        save_png = True

    charts: List[Path] = []
    skipped: List[str] = []
    pdf_entries: List[_ChartRecord] = []
    formatter = _currency_formatter()

    def record_chart(fig: "plt.Figure", base_name: str, title: str, caption: str) -> None:
        try:
            created, png_bytes = _write_figure(fig, base_name, target_dir, save_png=save_png, save_pdf=save_pdf)
        except OSError as exc:
            skipped.append(f"failed to save {base_name}: {exc}")
            return
        charts.extend(created)
        if bundle_pdf:
            pdf_entries.append(_ChartRecord(title=title, caption=caption, image_bytes=png_bytes))

    # Cumulative cost series ---------------------------------------------------------
    series = roi.display_series
    if not series:
        skipped.append("cumulative cost chart skipped (empty series)")
    else:
        labels = [point.period for point in series]
        positions = np.arange(len(series))
        fig, ax = plt.subplots(figsize=(9, 5), dpi=140)
        ax.plot(positions, [p.traditional_cumulative for p in series], color=TRADITIONAL_COLOR, linewidth=2.0, label="Traditional")
        ax.plot(positions, [p.device_cumulative for p in series], color=DEVICE_COLOR, linewidth=2.0, label="Layout printer")
        step = max(1, len(labels) // 12)
        ax.set_xticks(positions[::step])
        ax.set_xticklabels(labels[::step], rotation=30, ha="right")
        framing = "Month" if state.options.is_company else "Project"
        ax.set_title(f"Cumulative Layout Cost by {framing}")
        ax.set_ylabel("Cumulative cost")
        if formatter is not None:
            ax.yaxis.set_major_formatter(formatter)
        ax.grid(True, linestyle="--", alpha=0.3)
        ax.legend(loc="upper left", frameon=False)
        fig.tight_layout()
        record_chart(
            fig,
            "cumulative_cost",
            "Cumulative Cost",
            "Running total of traditional layout cost against the layout printer, with purchase capital in the first period.",
        )

    # Cost comparison bars -------------------------------------------------------------
    rows = [row for row in roi.cost_comparison if not row.name.startswith("Total")]
    if not rows:
        skipped.append("cost comparison chart skipped (no rows)")
    else:
        positions = np.arange(len(rows))
        width = 0.38 if not roi.show_rental_hint else 0.27
        fig, ax = plt.subplots(figsize=(9, 5), dpi=140)
        ax.bar(positions - width, [r.traditional for r in rows], width, color=TRADITIONAL_COLOR, label="Traditional")
        ax.bar(positions, [r.device for r in rows], width, color=DEVICE_COLOR, label="Layout printer")
        if roi.show_rental_hint:
            ax.bar(positions + width, [r.rental for r in rows], width, color=RENTAL_COLOR, label="Rental")
        ax.set_xticks(positions)
        ax.set_xticklabels([r.name for r in rows], rotation=20, ha="right")
        ax.set_title("Cost Comparison")
        if formatter is not None:
            ax.yaxis.set_major_formatter(formatter)
        ax.grid(True, axis="y", linestyle="--", alpha=0.3)
        ax.legend(frameon=False)
        fig.tight_layout()
        record_chart(
            fig,
            "cost_comparison",
            "Cost Comparison",
            "Labor, equipment, usage and rework cost for each method under the chosen ownership model.",
        )

    pdf_path: Optional[Path] = None
    if bundle_pdf and pdf_entries:
        pdf_path = target_dir / "ROI_Visual_Summary.pdf"
        try:
            _bundle_pdf(pdf_path, pdf_entries)
        except OSError as exc:
            logger.warning("Unable to build summary PDF: %s", exc)
            skipped.append(f"failed to build summary PDF: {exc}")
            pdf_path = None

    return {
        "charts": [str(path) for path in charts],
        "pdf": str(pdf_path) if pdf_path else None,
        "skipped": skipped,
    }
