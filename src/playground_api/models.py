from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cipher_stepper.models.state import CipherFamily


class CipherInfo(BaseModel):
    id: str
    name: str
    family: CipherFamily
    description: str
    self_inverse: bool
    config: Dict[str, Any]
    visual_hints: Dict[str, Any]


class RunRequest(BaseModel):
    cipher: str
    text: str
    options: Dict[str, Any] = Field(default_factory=dict)
    strict: bool = False
    trace: bool = False


class TraceStep(BaseModel):
    step: int
    plaintext: str
    ciphertext: str
    data: Dict[str, Any]


class RunResponse(BaseModel):
    cipher: str
    mode: str
    input: str
    output: str
    config: Dict[str, Any]
    data: Dict[str, Any]
    history: Optional[List[TraceStep]] = None


class AnalyzeRequest(BaseModel):
    text: str
    max_key_length: int = Field(default=15, ge=1, le=40)


class ShiftCandidate(BaseModel):
    shift: int
    confidence: float
    chi_squared: float


class KeyLengthScore(BaseModel):
    length: int
    score: float


class KeywordCandidate(BaseModel):
    keyword: str
    chi_squared: float
    preview: str


class AnalyzeResponse(BaseModel):
    total_letters: int
    counts: Dict[str, int]
    index_of_coincidence: float
    chi_squared: float
    cipher_type: str
    most_frequent: List[str]
    least_frequent: List[str]
    caesar_shifts: List[ShiftCandidate]
    kasiski: List[KeyLengthScore]
    ic_key_lengths: List[KeyLengthScore]
    vigenere: List[KeywordCandidate]
