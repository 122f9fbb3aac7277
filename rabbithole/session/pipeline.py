"""SessionPipeline: gate, embed, judge and record candidate steps.

Submissions to one pipeline are serialised with an asyncio.Lock, so the
decision for step n+1 always sees accepted step n in the ledger. Analyses
run on ledger snapshots and never hold the lock while computing.

Usage:
    pipeline = SessionPipeline(session_id="abc", embedder=EmbeddingService.from_settings())
    outcome = await pipeline.submit(candidate_text)
    if outcome.accepted:
        report = pipeline.analyze_patterns()
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from rabbithole.embedding.service import EmbeddingService
from rabbithole.enforcement.engine import EnforcementEngine, EnforcementVerdict
from rabbithole.models import JudgeScores, Step
from rabbithole.patterns.detector import GlobalPatternDetector, GlobalPatternReport
from rabbithole.scoring.metrics.judge import JudgeMetric
from rabbithole.scoring.quality_judge import HeuristicQualityJudge
from rabbithole.session.events import Event
from rabbithole.session.ledger import SessionLedger
from rabbithole.similarity.novelty import NoveltyConfig, NoveltyMetrics, analyze_novelty
from rabbithole.similarity.vectors import HistoricalEmbedding, cluster_by_threshold, novelty_score
from rabbithole.trajectory.analyzer import TrajectoryAnalyzer, TrajectoryMetrics
from rabbithole.trajectory.coherence_tracking import CoherenceReport, track_coherence

logger = logging.getLogger(__name__)

STEP_ACCEPTED = "step_accepted"
STEP_REJECTED = "step_rejected"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Verdict for one submission and the step it produced, if accepted.

    ``novelty`` is set only for accepted steps that carry an embedding.
    """

    verdict: EnforcementVerdict
    step: Optional[Step] = None
    novelty: Optional[NoveltyMetrics] = None

    @property
    def accepted(self) -> bool:
        return self.step is not None


class SessionPipeline:
    """Per-session orchestration of enforcement and analysis.

    Attributes:
        ledger: Accepted steps and events of the session
        engine: Enforcement gate
        embedder: Embedding service, or None to rely on lexical similarity
        judge: Heuristic judge used when a submission carries no scores
        domain: Domain the session explores, used for domain-crossing novelty
    """

    def __init__(
        self,
        session_id: str,
        question: str = "",
        engine: Optional[EnforcementEngine] = None,
        embedder: Optional[EmbeddingService] = None,
        judge: Optional[HeuristicQualityJudge] = None,
        ledger: Optional[SessionLedger] = None,
        trajectory: Optional[TrajectoryAnalyzer] = None,
        detector: Optional[GlobalPatternDetector] = None,
        domain: Optional[str] = None,
        novelty_config: Optional[NoveltyConfig] = None,
    ):
        self.session_id = session_id
        self.question = question
        self.engine = engine or EnforcementEngine()
        self.embedder = embedder
        self.judge = judge
        self.ledger = ledger or SessionLedger(session_id)
        self.trajectory = trajectory or TrajectoryAnalyzer()
        self.detector = detector or GlobalPatternDetector()
        self.domain = domain
        self.novelty_config = novelty_config or NoveltyConfig()
        self._quality = JudgeMetric()
        self._lock = asyncio.Lock()

    async def submit(
        self,
        text: str,
        judge_scores: Optional[JudgeScores] = None,
        coordinates: Optional[tuple[float, float, float]] = None,
    ) -> SubmissionOutcome:
        """Gate one candidate and append it when accepted.

        Args:
            text: Candidate step text
            judge_scores: External judge scores; the heuristic judge fills
                them in when None and a judge is configured
            coordinates: Optional layout position

        Returns:
            SubmissionOutcome with the verdict and, if accepted, the new step.

        Raises:
            InvalidInput: If ``text`` is empty.
        """
        async with self._lock:
            sequence_number = self.ledger.next_sequence_number()
            verdict = self.engine.evaluate(
                text, step_number=sequence_number, session_id=self.session_id
            )
            if not verdict.accept:
                self.ledger.record_event(
                    STEP_REJECTED,
                    {
                        "step_number": sequence_number,
                        "state": verdict.state.value,
                        "reasons": list(verdict.reasons),
                        "overall_score": verdict.overall_score,
                    },
                )
                return SubmissionOutcome(verdict=verdict)

            if judge_scores is None and self.judge is not None:
                judge_scores = self.judge.judge(text, self.question).to_judge_scores()

            step = Step(
                sequence_number=sequence_number,
                text=text,
                judge_scores=judge_scores,
                coordinates=coordinates,
            )
            if self.embedder is not None:
                step = await self.embedder.embed_step(step)

            payload = {"step_number": sequence_number, "overall_score": verdict.overall_score}
            novelty = None
            if step.embedding is not None:
                history = self._embedding_history(len(step.embedding))
                novelty = analyze_novelty(
                    text, step.vector, history, domain=self.domain, config=self.novelty_config
                )
                payload["novelty"] = novelty.overall_novelty
                payload["weighted_novelty"] = novelty_score(step.vector, history)
                payload["novelty_breakthrough"] = novelty.is_breakthrough

            self.ledger.append(step)
            self.ledger.record_event(STEP_ACCEPTED, payload, step_id=step.id)
            logger.info(
                f"Session {self.session_id}: accepted step {sequence_number} "
                f"(embedded: {step.embedding is not None})"
            )
            return SubmissionOutcome(verdict=verdict, step=step, novelty=novelty)

    def _embedding_history(self, dimensions: int) -> list[HistoricalEmbedding]:
        """Accepted embeddings of matching size, weighted by their judge quality."""
        return [
            HistoricalEmbedding(step.vector, quality=self._quality.compute(step))
            for step in self.ledger.snapshot()
            if step.embedding is not None and len(step.embedding) == dimensions
        ]

    def record_event(self, event_type: str, payload: dict, step_id: Optional[str] = None) -> Event:
        """Log an external event (ballot, mode transition) against this session."""
        return self.ledger.record_event(event_type, payload, step_id=step_id)

    def snapshot(self) -> tuple[Step, ...]:
        return self.ledger.snapshot()

    def analyze_trajectory(self) -> TrajectoryMetrics:
        return self.trajectory.analyze(self.snapshot())

    def analyze_patterns(self) -> GlobalPatternReport:
        return self.detector.analyze(self.snapshot())

    def track_coherence(self, window: int = 5) -> CoherenceReport:
        return track_coherence(self.snapshot(), window=window)

    def cluster_embeddings(self, threshold: float = 0.7) -> list[list[int]]:
        """Group embedded steps by cosine similarity.

        Returns:
            Clusters of sequence numbers. Steps without an embedding are
            left out.
        """
        embedded = [step for step in self.snapshot() if step.embedding is not None]
        clusters = cluster_by_threshold([step.vector for step in embedded], threshold=threshold)
        return [[embedded[i].sequence_number for i in cluster] for cluster in clusters]
