"""
Main CLI entry point for NeuroGuard

This module provides the command-line interface for building the labelled
GSR + Stroop dataset, training and evaluating the alertness classifier, and
predicting alertness for a single sample.
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional, Tuple

from ..core.config import LOOKBACK_MS, Config, load_config, validate_config, ensure_output_dirs
from ..core.data_types import LabeledSample, SignalStream, TrialRecord
from ..core.session import SessionState
from ..acquisition.readers import load_trials, load_signal
from ..acquisition.synthetic import synthesize_session, write_session_csv
from ..processing.dataset import DatasetBuilder, to_frame
from ..detection.predictor import (
    Predictor, ModelConfidence, RandomConfidence, ThresholdDistanceConfidence
)
from ..training.models import (
    FEATURE_NAMES, save_model, load_model, build_predictor_model
)
from ..training.reporter import ClassifierReporter, PlaceholderReporter
from ..communication.llm_client import client_from_env
from ..communication.commentary import CommentaryService
from ..utils.reporting import (
    setup_logging, plot_confusion_matrix, plot_feature_importances, save_metadata,
    class_distribution, report_to_dict, print_training_summary
)


def load_inputs(args: argparse.Namespace) -> Tuple[List[TrialRecord], SignalStream]:
    """
    Load trials and GSR stream from CSV files or generate them

    Raises:
        ValueError: If neither --fake nor both CSV paths were given
    """
    if args.fake:
        logging.info("Using synthetic session data")
        trials, stream = synthesize_session(n_trials=args.n_trials, seed=args.seed)
        if args.save_fake:
            trials_path = os.path.join(args.save_fake, "stroop_trials.csv")
            gsr_path = os.path.join(args.save_fake, "gsr.csv")
            write_session_csv(trials, stream, trials_path, gsr_path, seed=args.seed)
        return trials, stream

    if not args.trials or not args.gsr:
        raise ValueError("Both --trials and --gsr are required unless --fake is used")

    return load_trials(args.trials), load_signal(args.gsr)


def build_dataset(args: argparse.Namespace, config: Config,
                  session: SessionState) -> Tuple[LabeledSample, ...]:
    """Build the labelled dataset and load it into the session"""
    trials, stream = load_inputs(args)
    builder = DatasetBuilder(lookback_ms=config.lookback_ms, n_jobs=config.n_jobs)
    samples = builder.build(trials, stream)
    session.load_dataset(samples)

    if args.export:
        directory = os.path.dirname(args.export)
        if directory:
            os.makedirs(directory, exist_ok=True)
        to_frame(samples).to_csv(args.export, index=False)
        logging.info(f"Dataset exported to: {args.export}")

    return samples


def run_build(args: argparse.Namespace, config: Config, session: SessionState) -> int:
    """Build mode: print the labelled dataset summary"""
    samples = build_dataset(args, config, session)
    summary = session.summary()

    print(f"\nLabelled samples: {summary.total}")
    print(f"   Alert:  {summary.alert}")
    print(f"   Drowsy: {summary.drowsy}")

    if samples and args.verbose:
        print(to_frame(samples).head(10).to_string(index=False))
    return 0


def run_train(args: argparse.Namespace, config: Config, session: SessionState) -> int:
    """Train mode: evaluate, save the model and write reports"""
    samples = build_dataset(args, config, session)
    distribution = class_distribution(samples)

    if args.placeholder_metrics:
        reporter = PlaceholderReporter(seed=config.seed)
    else:
        reporter = ClassifierReporter(config)

    report = reporter.evaluate(samples)
    session.set_report(report)

    ensure_output_dirs(config)

    model_saved = False
    pipeline = getattr(reporter, "pipeline_", None)
    if pipeline is not None:
        save_model(pipeline, config.out_model)
        model_saved = True

    if args.save_predictor:
        try:
            save_model(build_predictor_model(samples, config), args.save_predictor)
        except ValueError as e:
            logging.warning(f"Predictor model not saved: {e}")

    plot_confusion_matrix(report, config.out_confmat)
    plot_feature_importances(report.importances, config.out_importance)

    metadata = {
        'timestamp': datetime.now().isoformat(),
        'source': 'synthetic' if args.fake else {'trials': args.trials, 'gsr': args.gsr},
        'config': {
            'lookback_ms': config.lookback_ms,
            'classifier': config.classifier,
            'cv_folds': config.cv_folds,
            'n_estimators': config.n_estimators,
            'seed': config.seed,
        },
        'placeholder_metrics': bool(args.placeholder_metrics),
        'model_path': config.out_model if model_saved else None,
        'feature_names': list(FEATURE_NAMES),
        'class_distribution': distribution,
        'report': report_to_dict(report),
    }
    save_metadata(metadata, config.out_meta)

    print_training_summary(config, distribution, report, placeholder=args.placeholder_metrics)

    if args.commentary:
        service = CommentaryService(client=client_from_env())
        analysis = asyncio.run(service.analyze_results(report))
        session.set_analysis(analysis)
        print("\nEXPERT INSIGHTS:")
        print(analysis)

    return 0


def make_predictor(args: argparse.Namespace, config: Config) -> Predictor:
    """Predictor with the confidence strategy selected on the command line"""
    distance = ThresholdDistanceConfidence(band=config.confidence_band)
    if args.model:
        return Predictor(confidence=ModelConfidence(load_model(args.model), fallback=distance))
    if args.random_confidence:
        return Predictor(confidence=RandomConfidence(band=config.confidence_band, seed=config.seed))
    return Predictor(confidence=distance)


def run_predict(args: argparse.Namespace, config: Config, session: SessionState) -> int:
    """Predict mode: classify one (RT, GSR mean, peak count) sample"""
    form = session.form_inputs
    rt_ms = args.rt if args.rt is not None else form.rt_ms
    gsr_mean = args.gsr_mean if args.gsr_mean is not None else form.gsr_mean
    peak_count = args.peaks if args.peaks is not None else form.peak_count

    predictor = make_predictor(args, config)
    result = predictor.predict(rt_ms, gsr_mean, peak_count)
    session.record_prediction(result)

    print(f"\nInput: RT={rt_ms:.0f} ms | GSR mean={gsr_mean:.2f} uS | SCR peaks={peak_count}")
    print(f"State: {result.label.value} | Confidence: {result.confidence * 100:.1f}%")

    if args.commentary:
        service = CommentaryService(client=client_from_env(), predictor=predictor)
        text = asyncio.run(service.clinical_commentary(rt_ms, gsr_mean, peak_count, result.label))
        print(f"\nInterpretation: {text}")

    return 0


def run_ask(args: argparse.Namespace, config: Config, session: SessionState) -> int:
    """Ask mode: extract a sample from free text and predict it"""
    service = CommentaryService(client=client_from_env(), predictor=make_predictor(args, config))
    parsed = asyncio.run(service.parse_and_predict(args.ask))

    print(f"\n{parsed.explanation}")
    if parsed.prediction is not None:
        session.record_prediction(parsed.prediction)
        print(f"State: {parsed.prediction.label.value} | "
              f"Confidence: {parsed.prediction.confidence * 100:.1f}%")
    return 0


def create_config(args: argparse.Namespace) -> Config:
    """Config from file and/or command line; flags win over file values"""
    overrides = {
        'lookback_ms': args.lookback_ms,
        'n_jobs': args.jobs,
        'classifier': args.classifier,
        'cv_folds': args.cv_folds,
        'seed': args.seed,
    }
    if args.config:
        config = load_config(args.config, **overrides)
    else:
        config = Config(**{key: value for key, value in overrides.items() if value is not None})

    if args.out_dir:
        config.out_model = os.path.join(args.out_dir, os.path.basename(config.out_model))
        config.out_meta = os.path.join(args.out_dir, os.path.basename(config.out_meta))
        config.out_confmat = os.path.join(args.out_dir, os.path.basename(config.out_confmat))
        config.out_importance = os.path.join(args.out_dir, os.path.basename(config.out_importance))

    validate_config(config)
    return config


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="NeuroGuard - GSR + Stroop alertness classification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the labelled dataset from recordings
  python -m neuroguard --build --trials data/stroop.csv --gsr data/gsr.csv --export out/dataset.csv

  # Train and evaluate on synthetic data
  python -m neuroguard --train --fake --classifier rf --out-dir models

  # Predict a single sample
  python -m neuroguard --predict --rt 1250 --gsr-mean 1.2 --peaks 1

  # Free-text query (needs NEUROGUARD_LLM_URL)
  python -m neuroguard --ask "RT about 900ms, conductance 1.9, two peaks"
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument("--build", action="store_true",
                           help="Build the labelled dataset")
    mode_group.add_argument("--train", action="store_true",
                           help="Train and evaluate the alertness classifier")
    mode_group.add_argument("--predict", action="store_true",
                           help="Predict alertness for one sample")
    mode_group.add_argument("--ask", metavar="TEXT",
                           help="Extract a sample from free text and predict it")

    # Data source options
    parser.add_argument("--trials", help="Stroop trial CSV file")
    parser.add_argument("--gsr", help="GSR CSV file (time in seconds, conductance in uS)")
    parser.add_argument("--fake", action="store_true",
                       help="Use a synthetic session instead of CSV files")
    parser.add_argument("--n-trials", type=int, default=120,
                       help="Trials in the synthetic session (default: 120)")
    parser.add_argument("--save-fake", metavar="DIR",
                       help="Write the synthetic session as CSV files into DIR")

    # Processing parameters
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--lookback-ms", type=int, default=None,
                       help=f"GSR look-back window in ms (default: {LOOKBACK_MS})")
    parser.add_argument("--jobs", type=int, default=None,
                       help="Parallel workers for dataset building (-1 for all cores)")
    parser.add_argument("--seed", type=int, default=None,
                       help="Random seed (default: 42)")

    # Training options
    parser.add_argument("--classifier", choices=["rf", "lda", "svm"], default=None,
                       help="Classifier for training (default: rf)")
    parser.add_argument("--cv-folds", type=int, default=None,
                       help="Cross-validation folds (default: 5)")
    parser.add_argument("--placeholder-metrics", action="store_true",
                       help="Report synthesized metrics instead of training")
    parser.add_argument("--out-dir", help="Directory for model, metadata and plots")
    parser.add_argument("--save-predictor", metavar="PATH",
                       help="Also fit and save a model on (RT, GSR mean, peaks)")
    parser.add_argument("--export", metavar="CSV",
                       help="Write the labelled dataset to CSV")

    # Prediction options
    parser.add_argument("--rt", type=float, help="Reaction time in ms (default: 850)")
    parser.add_argument("--gsr-mean", type=float, help="Mean conductance in uS (default: 1.85)")
    parser.add_argument("--peaks", type=int, help="SCR peak count (default: 2)")
    parser.add_argument("--model", help="Predictor model for model-based confidence")
    parser.add_argument("--random-confidence", action="store_true",
                       help="Uniform confidence draw instead of distance-based confidence")

    # Commentary
    parser.add_argument("--commentary", action="store_true",
                       help="Ask the text-generation service to explain the results")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    print("=" * 60)
    print("NeuroGuard - GSR + Stroop Alertness")
    print("=" * 60)

    session = SessionState()

    try:
        config = create_config(args)

        if args.build:
            return run_build(args, config, session)
        elif args.train:
            return run_train(args, config, session)
        elif args.predict:
            return run_predict(args, config, session)
        elif args.ask is not None:
            return run_ask(args, config, session)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except (FileNotFoundError, ValueError) as e:
        logging.error(str(e))
        return 1
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
