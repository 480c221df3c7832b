"""
CVD Risk Engine - Command Line Demo

Reads a patient profile (JSON, any supported units), runs one or both risk
models and prints the result.

Usage:
    cvdrisk --sample                        # Score the sample patient
    cvdrisk --file patient.json             # Score a profile from file
    cvdrisk --file patient.json --model qrisk3 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from cvdrisk.core.config import settings
from cvdrisk.schemas.base import RiskModelId
from cvdrisk.schemas.risk import CalculationFailure, RiskOutcome
from cvdrisk.services.risk_calculator import CVDRiskCalculator

# ============================================================================
# Sample Patient
# ============================================================================

SAMPLE_PATIENT: dict[str, Any] = {
    "age": 58,
    "sex": "male",
    "ethnicity": "indian",
    "smoking": "moderate",
    "diabetes": "none",
    "systolic_bp": 148,
    "sbp_readings": [152, 146, 149],
    "total_cholesterol": 232,
    "hdl": 42,
    "triglycerides": 160,
    "cholesterol_unit": "mg/dL",
    "triglycerides_unit": "mg/dL",
    "height": 70,
    "height_unit": "in",
    "weight": 198,
    "weight_unit": "lb",
    "lpa": 120,
    "lpa_unit": "nmol/L",
    "family_history_premature_cvd": True,
    "townsend": 1.2,
}

MODEL_CHOICES = {
    "framingham": [RiskModelId.FRAMINGHAM],
    "qrisk3": [RiskModelId.QRISK3],
    "both": [RiskModelId.FRAMINGHAM, RiskModelId.QRISK3],
}

# ============================================================================
# Display Functions
# ============================================================================


class Colors:
    """ANSI color codes for terminal output."""
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'
    GRAY = '\033[90m'


CATEGORY_COLORS = {"low": Colors.GREEN, "borderline": Colors.YELLOW, "intermediate": Colors.YELLOW}


def print_header(text: str, char: str = "="):
    """Print a formatted header."""
    width = 80
    print()
    print(f"{Colors.BOLD}{Colors.CYAN}{char * width}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text.center(width)}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{char * width}{Colors.END}")


def print_item(label: str, value: str, indent: int = 2):
    """Print a labeled item."""
    spaces = " " * indent
    print(f"{spaces}{Colors.GRAY}{label}:{Colors.END} {value}")


def print_warning(text: str):
    """Print warning message."""
    print(f"  {Colors.YELLOW}!{Colors.END} {text}")


def print_error(text: str):
    """Print error message."""
    print(f"  {Colors.RED}✗{Colors.END} {text}")


def display_outcome(outcome: RiskOutcome):
    """Pretty-print a result or failure."""
    print_header(outcome.model.value.upper())
    if isinstance(outcome, CalculationFailure):
        print_error(f"{outcome.error_type}: {outcome.message}")
        return

    color = CATEGORY_COLORS.get(outcome.risk_category, Colors.RED)
    print_item("Base risk", f"{outcome.base_risk_percent:.1f}%")
    print_item("Final risk", f"{outcome.modified_risk_percent:.1f}%")
    print_item("Category", f"{color}{outcome.risk_category}{Colors.END} {outcome.category_description}")
    print_item("Heart age", str(outcome.heart_age))
    if outcome.relative_risk is not None:
        print_item("Relative risk", f"{outcome.relative_risk:.2f}x ideal")
    for modifier in outcome.modifiers:
        print_item("Modifier", f"{modifier.name} x{modifier.factor:g} ({modifier.detail})", indent=4)
    for factor in outcome.contributing_factors:
        print_item("Factor", f"{factor.name} [{factor.impact.value}]", indent=4)
    for warning in outcome.warnings:
        print_warning(warning)


# ============================================================================
# Main Entry Point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="CVD Risk Engine - 10-year Framingham and QRISK3 risk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cvdrisk --sample                         # Score sample patient with both models
  cvdrisk --file patient.json              # Score profile from file
  cvdrisk --file patient.json -m qrisk3 -j # QRISK3 only, JSON output
"""
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--file', '-f', help='Path to patient profile JSON')
    source.add_argument('--sample', '-s', action='store_true', help='Use sample patient')
    parser.add_argument('--model', '-m', choices=sorted(MODEL_CHOICES), default='both', help='Model(s) to run')
    parser.add_argument('--json', '-j', action='store_true', help='Print results as JSON')

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.sample:
        patient = SAMPLE_PATIENT
    else:
        path = Path(args.file)
        if not path.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        try:
            patient = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            print(f"Error: Invalid JSON in {args.file}: {e}", file=sys.stderr)
            return 1

    calculator = CVDRiskCalculator()
    outcomes = [calculator.calculate(patient, model) for model in MODEL_CHOICES[args.model]]

    if args.json:
        print(json.dumps([outcome.model_dump(mode="json") for outcome in outcomes], indent=2))
    else:
        for outcome in outcomes:
            display_outcome(outcome)

    return 0 if all(outcome.success for outcome in outcomes) else 2


if __name__ == "__main__":
    sys.exit(main())
