from typing import Any, get_origin

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class FormAnswers(BaseModel):
    """Base for per-kind answer payloads.

    Answers arrive from guided forms that are validated client-side, so the
    models never reject a payload: missing values take the field default,
    numbers that fail to parse fall back to the default and unknown keys are
    kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_loose_values(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        default = field.get_default(call_default_factory=True)
        return _coerce(value, field.annotation, default)


class OpaqueAnswers(FormAnswers):
    """Answers for a kind without a dedicated model."""


class CompassCheckAnswers(FormAnswers):
    situation: str = ""
    unsettledReason: str = ""
    weightLevel: str = ""
    affecting: str = ""
    challengedValues: list[str] = []
    topValue: str = ""
    whyMatters: str = ""
    challengeReason: str = ""
    professionalObligation: str = ""
    personalValues: str = ""
    legitimatelyHard: str = ""
    choice: str = ""
    alternativeCost: str = ""
    selfForgiveness: str = ""
    biggerPicture: str = ""
    harmWithoutInterpreters: str = ""
    valuesIntact: list[str] = []
    taught: str = ""
    differentNext: str = ""
    supportNeeded: str = ""
    honorAction: str = ""
    stressLevel: int = 5
    energyLevel: int = 5


class MentoringReflectionAnswers(FormAnswers):
    valuableHeard: str = ""
    surprisingAdvice: str = ""
    challengedThinking: str = ""
    neededValidation: str = ""
    learnedWork: str = ""
    learnedSelf: str = ""
    learnedGrowth: str = ""
    patternSeen: str = ""
    assumptionQuestion: str = ""
    sessionFeeling: str = ""
    difficultTrigger: str = ""
    difficultMeaning: str = ""
    difficultProcess: str = ""
    positiveCreated: str = ""
    positiveCultivate: str = ""
    immediateAction: str = ""
    immediateWhen: str = ""
    immediateBecause: str = ""
    weekAction: str = ""
    weekDay: str = ""
    weekPractice: str = ""
    monthAction: str = ""
    resource1: str = ""
    resource2: str = ""
    personToTalk: str = ""
    checkInDate: str = ""
    nowClear: str = ""
    stillFuzzy: str = ""
    mysterious: str = ""
    nextEdge: str = ""
    needsFor: list[str] = []
    workedWell: list[str] = []
    couldImprove: list[str] = []
    followUp: str = ""
    stopDoing: str = ""
    startDoing: str = ""
    continueDoing: str = ""
    growthIndicator: str = ""
    quotableInsight: str = ""
    storyExample: str = ""
    mistakeAvoid: str = ""
    successPattern: str = ""
    stressLevel: int = 5
    energyLevel: int = 5


class TeamingReflectionAnswers(FormAnswers):
    nailed: str = ""
    smoothestHandoff: str = ""
    clicked: str = ""
    acknowledgment: str = ""
    handoffs: str = ""
    bestMoment: str = ""
    whyItWorked: str = ""
    supportBehaviors: str = ""
    plannedLoad: str = ""
    actualLoad: str = ""
    loadReason: list[str] = []
    loadNextTime: str = ""
    errorsCaught: str = ""
    recoverySuccess: str = ""
    bestRecovery: str = ""
    recoveryImprovement: str = ""
    recoveryNextTime: str = ""
    comfortableWith: list[str] = []
    partnerSeemed: str = ""
    trustBuilders: str = ""
    trustStrains: str = ""
    partnerHelped: str = ""
    partnerStrength: str = ""
    partnerIdea: str = ""
    selfProud: str = ""
    selfWorkOn: str = ""
    selfPractice: str = ""
    keepDoing1: str = ""
    keepDoing2: str = ""
    tryDifferently: str = ""
    prepareBetter: str = ""
    improvedSignal: str = ""
    teamPatterns: str = ""
    overallRating: str = ""
    stressLevel: int = 5
    energyLevel: int = 5


class WellnessCheckInAnswers(FormAnswers):
    headNeck: str = ""
    shouldersBack: str = ""
    chestBreathing: str = ""
    stomachDigestion: str = ""
    overallEnergy: str = ""
    bodyMessage: str = ""
    primaryEmotion: str = ""
    intensityLevel: str = ""
    emotionDuration: str = ""
    emotionOrigin: str = ""
    originDetail: str = ""
    workingMemory: str = ""
    decisionMaking: str = ""
    languageProcessing: str = ""
    attentionSpan: str = ""
    cognitiveRedFlags: list[str] = []
    intrusion: str = ""
    avoidance: str = ""
    arousal: str = ""
    worldview: str = ""
    sleep: str = ""
    nutrition: str = ""
    movement: str = ""
    medicalCare: str = ""
    supportSystem: str = ""
    professionalCommunity: str = ""
    supervision: str = ""
    copingStrategies: str = ""
    boundaries: str = ""
    meaningPurpose: str = ""
    needsAttention: list[str] = []
    wellnessLevel: str = ""
    levelNeed: str = ""
    stopReduce: str = ""
    startIncrease: str = ""
    connectWith: str = ""
    boundarySet: str = ""
    crisisAction: str = ""
    physicalTrend: str = ""
    emotionalTrend: str = ""
    mentalTrend: str = ""
    overallTrend: str = ""
    stressLevel: int = 5
    energyLevel: int = 5


class PostAssignmentDebriefAnswers(FormAnswers):
    stressLevelBefore: int = 5
    stressLevelAfter: int = 5
    completionLevel: str = ""
    hardestPart: str = ""
    stillHolding: str = ""
    handledWell: str = ""
    clientEmotions: list[str] = []
    professionalResponses: list[str] = []
    personalEmotions: list[str] = []
    newTerminology: str = ""
    communicationPattern: str = ""
    futureChange: str = ""
    redFlags: list[str] = []


class ValuesAlignmentAnswers(FormAnswers):
    values_check: str = ""
    alignment_reflection: str = ""
    ethical_tension: str = ""
    decision_values: str = ""


def _coerce(value: Any, annotation: Any, default: Any) -> Any:
    if value is None:
        return default
    if annotation is str:
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value if item is not None)
        return str(value)
    if get_origin(annotation) is list:
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value if item not in (None, "")]
        return default
    if annotation is int:
        if isinstance(value, bool):
            return int(value)
        try:
            return int(round(float(value)))
        except (TypeError, ValueError, OverflowError):
            return default
    return value
