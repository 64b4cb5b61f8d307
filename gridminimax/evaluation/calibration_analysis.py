"""
Calibration analysis utilities.

Text ranking of the candidates a sweep evaluated, and plots of how each weight
affects the terminal metric.
"""

import statistics
from collections import defaultdict
from pathlib import Path

try:
    import matplotlib.pyplot as plt
    import seaborn as sns
    PLOTTING_AVAILABLE = True
except ImportError:
    PLOTTING_AVAILABLE = False

from gridminimax.evaluation.benchmark_data import CalibrationReport, CandidateResult


class CalibrationAnalysis:
    """Analysis and visualization tools for a calibration report"""

    def __init__(self, report: CalibrationReport):
        self.report = report

    def ranked_candidates(self, top: int | None = None) -> list[CandidateResult]:
        """Candidates by mean terminal metric, best first (stable for ties)."""
        ranked = sorted(self.report.results.values(), key=lambda r: r.mean_metric, reverse=True)
        return ranked if top is None else ranked[:top]

    def weight_effects(self) -> dict[str, dict[float, float]]:
        """For each feature, the mean terminal metric of all candidates sharing a weight value"""
        grouped: dict[str, dict[float, list[float]]] = defaultdict(lambda: defaultdict(list))
        for result in self.report.results.values():
            for name, value in result.weights.as_dict().items():
                grouped[name][round(value, 6)].append(result.mean_metric)

        return {
            name: {value: statistics.fmean(metrics) for value, metrics in sorted(by_value.items())}
            for name, by_value in grouped.items()
        }

    def generate_report(self, output_file: str | None = None, top: int = 10) -> str:
        """Build a text report of the sweep; also write it to output_file when given"""
        report_lines = []
        report_lines.append("=" * 60)
        report_lines.append("WEIGHT CALIBRATION REPORT")
        report_lines.append("=" * 60)
        report_lines.append(self.report.summary())
        report_lines.append("")

        ranked = self.ranked_candidates(top)
        if ranked:
            report_lines.append(f"TOP {len(ranked)} CANDIDATES")
            report_lines.append("-" * 40)
            for i, result in enumerate(ranked, 1):
                report_lines.append(
                    f"  {i}. {result.weights}: {result.mean_metric:.1f} avg metric, "
                    f"{result.mean_moves:.1f} avg moves ({result.runs} games)"
                )
            report_lines.append("")

            report_lines.append("WEIGHT EFFECTS")
            report_lines.append("-" * 40)
            for name, effects in self.weight_effects().items():
                report_lines.append(f"  {name}:")
                for value, metric in effects.items():
                    report_lines.append(f"    {value:g} -> {metric:.1f}")

        text = "\n".join(report_lines)

        if output_file is not None:
            with open(output_file, "w") as f:
                f.write(text)
            print(f"Calibration report saved to {output_file}")

        return text

    def save_weight_plots(self, output_dir: str = "calibration_plots") -> None:
        """Save one line plot per feature weight against the mean terminal metric"""
        if not PLOTTING_AVAILABLE:
            print("Matplotlib/Seaborn not available. Install with: pip install matplotlib seaborn")
            return

        effects = self.weight_effects()
        if not effects:
            print("No calibration results to plot")
            return

        Path(output_dir).mkdir(exist_ok=True)

        for name, by_value in effects.items():
            plt.figure(figsize=(8, 5))
            sns.lineplot(x=list(by_value.keys()), y=list(by_value.values()), marker="o")
            plt.title(f"Mean Terminal Metric by {name} Weight")
            plt.xlabel(f"{name} weight")
            plt.ylabel("Mean terminal metric")
            plt.tight_layout()
            plt.savefig(f"{output_dir}/{name}.png")
            plt.close()

        print(f"Plots saved to {output_dir}/")
