"""
Option sets for the BAS web services

Each service takes a handful of string-valued options whose legal values are
defined by the service itself. The models here enumerate the options this
client knows about, carry their defaults, and render them as the text parts
of the multipart request. Unknown option names are rejected.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def true_false(value: bool) -> str:
    return "true" if value else "false"


class ServiceOptions(BaseModel):
    """Base class for per-service option sets"""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    def to_fields(self) -> Dict[str, str]:
        """Render the options as multipart text fields, in wire order"""
        raise NotImplementedError


class G2POptions(ServiceOptions):
    """
    Options for the G2P grapheme-to-phoneme service

    Attributes:
        iform: Format of the input - "txt" (connected text, tokenized before
            conversion), "list" (unconnected words), "tcf", "tg" or "bpf"
        tgitem: TextGrid tier to transcribe when iform is "tg"
        tgrate: Sample rate of the TextGrid input
        outsym: Output phoneme inventory - "sampa", "x-sampa", "maus-sampa",
            "ipa" or "arpabet" (eng-US only)
        featset: "standard" letter window, or "extended" which adds part of
            speech and morphology
        oform: Output format - "bpf", "bpfs", "txt", "tab", "exttab", "lex",
            "extlex", "exttcf", "tg" or "exttg"
        syl: Syllabify the output transcription
        stress: Mark word stress in the output transcription
        nrm: Detect and expand non-standard words (numbers, dates, ...)
        com: Treat <*> strings as annotation markers and pass them through
        align: Letter-align the transcription - "yes", "no" or "sym"
    """

    iform: str = "txt"
    tgitem: str = ""
    tgrate: int = Field(16000, gt=0)
    outsym: str = "sampa"
    featset: str = "standard"
    oform: str = "bpf"
    syl: bool = False
    stress: bool = False
    nrm: bool = True
    com: bool = False
    align: Literal["yes", "no", "sym"] = "no"

    def to_fields(self) -> Dict[str, str]:
        return {
            "iform": self.iform,
            "tgitem": self.tgitem,
            "tgrate": str(self.tgrate),
            "outsym": self.outsym,
            "featset": self.featset,
            "oform": self.oform,
            "syl": yes_no(self.syl),
            "stress": yes_no(self.stress),
            "nrm": yes_no(self.nrm),
            "com": yes_no(self.com),
            "align": self.align,
        }


class MAUSOptions(ServiceOptions):
    """
    Options for the MAUS forced-alignment service

    Outformat and outsymbol are always sent, and minpauslen unless it is
    set to None. The rest are left to the service's defaults unless set.
    """

    outformat: str = "TextGrid"
    outsymbol: str = "sampa"
    # in 10 ms frames
    minpauslen: Optional[int] = Field(5, ge=0)
    startword: Optional[int] = Field(None, ge=0)
    endword: Optional[int] = Field(None, ge=0)
    mausshift: Optional[int] = None
    insprob: Optional[float] = Field(None, ge=0.0, le=1.0)
    inskantextgrid: Optional[bool] = None
    insorttextgrid: Optional[bool] = None
    usetrn: Optional[bool] = None
    noinitialfinalsilence: Optional[bool] = None
    weight: Optional[float] = None
    modus: Optional[str] = None

    def to_fields(self) -> Dict[str, str]:
        fields = {
            "OUTFORMAT": self.outformat,
            "OUTSYMBOL": self.outsymbol,
        }
        optional = [
            ("USETRN", self.usetrn),
            ("MINPAUSLEN", self.minpauslen),
            ("STARTWORD", self.startword),
            ("ENDWORD", self.endword),
            ("MAUSSHIFT", self.mausshift),
            ("INSPROB", self.insprob),
            ("INSKANTEXTGRID", self.inskantextgrid),
            ("INSORTTEXTGRID", self.insorttextgrid),
            ("NOINITIALFINALSILENCE", self.noinitialfinalsilence),
            ("WEIGHT", self.weight),
            ("MODUS", self.modus),
        ]
        for name, value in optional:
            if value is None:
                continue
            fields[name] = true_false(value) if isinstance(value, bool) else str(value)
        return fields


class Pho2SylOptions(ServiceOptions):
    """
    Options for the Pho2Syl syllabification service

    Attributes:
        tier: BPF tier to syllabify, e.g. "KAN" or "MAU"
        oform: Output format, e.g. "bpf" or "tg"
        wsync: Keep syllables in sync with word boundaries
        rate: Sample rate, needed for TextGrid output from a BPF without one
    """

    tier: str = "KAN"
    oform: str = "bpf"
    wsync: Optional[bool] = None
    rate: Optional[int] = Field(None, gt=0)

    def to_fields(self) -> Dict[str, str]:
        fields = {
            "tier": self.tier,
            "oform": self.oform,
        }
        if self.wsync is not None:
            fields["wsync"] = yes_no(self.wsync)
        if self.rate is not None:
            fields["rate"] = str(self.rate)
        return fields


class TTSOptions(ServiceOptions):
    """Options for the text-to-speech service"""

    input_type: str = "TEXT"
    output_type: str = "AUDIO"
    audio: str = "WAVE_FILE"
    voice: str = "bits1unitselautolabel"

    def to_fields(self) -> Dict[str, str]:
        return {
            "INPUT_TYPE": self.input_type,
            "OUTPUT_TYPE": self.output_type,
            "AUDIO": self.audio,
            "VOICE": self.voice,
        }


class TextAlignOptions(ServiceOptions):
    """
    Options for the TextAlign service

    Attributes:
        cost: Cost function for the alignment, e.g. "naive", "intrinsic",
            "import" (with a cost file) or "g2p_<language>"
        displc: Display the cost of the alignment
        atype: Alignment direction - "dir" or "sym"
    """

    cost: str = "naive"
    displc: bool = False
    atype: str = "dir"

    def to_fields(self) -> Dict[str, str]:
        return {
            "cost": self.cost,
            "displc": yes_no(self.displc),
            "atype": self.atype,
        }
