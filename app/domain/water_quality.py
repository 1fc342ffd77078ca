"""
Water Quality Status Evaluator
==============================

Pure rules mapping one reading (pH, temperature, ammonia) to a three-level
status with remediation guidance, and combining the three per-parameter
statuses into one overall status.

Thresholds:

=============  ============  =========================  ================
Parameter      Aman          Waspada                    Bahaya
=============  ============  =========================  ================
pH             [6.8, 7.8]    [6.0, 6.7] or [7.9, 8.5]   everything else
Suhu (°C)      [25, 30]      [22, 25) or (30, 32]       < 22 or > 32
Amonia (ppm)   [0, 0.2]      (0.2, 0.5]                 > 0.5 or < 0
=============  ============  =========================  ================

NaN is always Bahaya with the invalid-sensor recommendation. Infinities are
ordinary ordered values and land on the matching Bahaya side.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from app.enums import StatusLevel

CLASS_AMAN = "text-green-500"
CLASS_WASPADA = "text-yellow-500"
CLASS_BAHAYA = "text-red-500"

_CLASS_BY_STATUS = {
    StatusLevel.AMAN: CLASS_AMAN,
    StatusLevel.WASPADA: CLASS_WASPADA,
    StatusLevel.BAHAYA: CLASS_BAHAYA,
}

_EMOJI_BY_STATUS = {
    StatusLevel.AMAN: "✅",
    StatusLevel.WASPADA: "⚠️",
    StatusLevel.BAHAYA: "🚨",
}

INVALID_VALUE_RECOMMENDATION = (
    "1. Nilai sensor tidak valid: periksa koneksi dan probe sensor.\n"
    "2. Kalibrasi ulang sensor sebelum mengambil tindakan pada air."
)


class Recommendations:
    """Remediation texts, one per parameter sub-range."""

    PH_AMAN = "Pertahankan. Monitor rutin. Pastikan pakan tidak berlebih dan filter berjalan baik."
    PH_WASPADA_ACID = (
        "1. Tingkatkan aerasi.\n"
        "2. Cek pakan: jangan berlebih.\n"
        "3. Buffer bertahap: tambahkan pH-up, kapur pertanian (CaCO3) / kulit kerang sedikit demi sedikit."
    )
    PH_WASPADA_BASE = (
        "1. Ganti air sebagian (20-30%) dengan air netral.\n"
        "2. Tingkatkan aerasi.\n"
        "3. Tambahkan bahan alami seperti daun ketapang kering (jika sesuai ekosistem)."
    )
    PH_BAHAYA_ACID = (
        "1. DARURAT: Ganti air (30-50%) dengan air baru ter-buffer netral.\n"
        "2. Buffer aktif: kapur pertanian/dolomit dosis terukur.\n"
        "3. Cek sumber air. Pindahkan ikan ke bak karantina jika memungkinkan."
    )
    PH_BAHAYA_BASE = (
        "1. DARURAT: Ganti air (30-50%).\n"
        "2. Cari penyebab: kemungkinan ledakan alga (fotosintesis berlebih) -> beri naungan.\n"
        "3. Gunakan buffer pH-down secara hati-hati dan bertahap."
    )

    SUHU_AMAN = "Pertahankan. Pastikan sirkulasi air baik. Heater/chiller berfungsi normal."
    SUHU_WASPADA_COLD = "1. Nyalakan/cek heater (target 26°C).\n2. Kurangi pakan: metabolisme melambat."
    SUHU_WASPADA_HOT = (
        "1. Tambah aerasi maksimal (O2 turun saat panas).\n"
        "2. Beri naungan (paranet/jaring).\n"
        "3. Kurangi pakan (stres panas)."
    )
    SUHU_BAHAYA_COLD = (
        "1. DARURAT: Cek heater dan kapasitasnya.\n"
        "2. Stop pakan sementara.\n"
        "3. Isolasi kolam dari angin malam."
    )
    SUHU_BAHAYA_HOT = (
        "1. DARURAT: Tambah aerasi maksimal segera.\n"
        "2. Naungan penuh.\n"
        "3. Ganti air (20%) dengan yang lebih sejuk (bedanya <=4°C).\n"
        "4. Kolam kecil: gunakan botol berisi es tertutup (jangan es langsung)."
    )

    AMONIA_AMAN = "Pertahankan. Jaga manajemen pakan (jangan berlebih). Bersihkan filter mekanis rutin."
    AMONIA_WASPADA = (
        "1. Kurangi/stop pakan 1 hari (atau kurangi 50%).\n"
        "2. Ganti air (25-30%).\n"
        "3. Cek filter biologis. Tambahkan bakteri starter/probiotik."
    )
    AMONIA_BAHAYA = (
        "1. DARURAT: Ganti air (50%).\n"
        "2. Stop pakan 1-2 hari.\n"
        "3. Tambah aerasi maksimal.\n"
        "4. Gunakan ammonia binder/detoxifier.\n"
        "5. Cek kemungkinan bangkai ikan di dasar."
    )


@dataclass(frozen=True)
class StatusDetail:
    """Status of one measured parameter."""

    status: StatusLevel
    recommendation: str
    class_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "recommendation": self.recommendation,
            "class_name": self.class_name,
        }


@dataclass(frozen=True)
class StatusDisplay:
    """Presentation metadata for an overall status."""

    emoji: str
    class_name: str

    def to_dict(self) -> dict[str, str]:
        return {"emoji": self.emoji, "class_name": self.class_name}


@dataclass(frozen=True)
class ReadingEvaluation:
    """Per-parameter details plus the combined status of one reading."""

    ph: StatusDetail
    temperature: StatusDetail
    ammonia: StatusDetail
    overall: StatusLevel
    display: StatusDisplay

    def to_dict(self) -> dict[str, Any]:
        return {
            "ph": self.ph.to_dict(),
            "temperature": self.temperature.to_dict(),
            "ammonia": self.ammonia.to_dict(),
            "overall": self.overall.value,
            "display": self.display.to_dict(),
        }


def _detail(status: StatusLevel, recommendation: str) -> StatusDetail:
    return StatusDetail(status=status, recommendation=recommendation, class_name=_CLASS_BY_STATUS[status])


def _invalid() -> StatusDetail:
    return _detail(StatusLevel.BAHAYA, INVALID_VALUE_RECOMMENDATION)


def get_status_ph(ph_level: float) -> StatusDetail:
    """Classify a pH value."""
    if math.isnan(ph_level):
        return _invalid()
    if 6.8 <= ph_level <= 7.8:
        return _detail(StatusLevel.AMAN, Recommendations.PH_AMAN)
    if 6.0 <= ph_level <= 6.7:
        return _detail(StatusLevel.WASPADA, Recommendations.PH_WASPADA_ACID)
    if 7.9 <= ph_level <= 8.5:
        return _detail(StatusLevel.WASPADA, Recommendations.PH_WASPADA_BASE)
    # Values in the (6.7, 6.8) and (7.8, 7.9) gaps are Bahaya as well; the side decides the text.
    if ph_level < 6.8:
        return _detail(StatusLevel.BAHAYA, Recommendations.PH_BAHAYA_ACID)
    return _detail(StatusLevel.BAHAYA, Recommendations.PH_BAHAYA_BASE)


def get_status_temperature(temperature: float) -> StatusDetail:
    """Classify a water temperature in °C."""
    if math.isnan(temperature):
        return _invalid()
    if 25 <= temperature <= 30:
        return _detail(StatusLevel.AMAN, Recommendations.SUHU_AMAN)
    if 22 <= temperature < 25:
        return _detail(StatusLevel.WASPADA, Recommendations.SUHU_WASPADA_COLD)
    if 30 < temperature <= 32:
        return _detail(StatusLevel.WASPADA, Recommendations.SUHU_WASPADA_HOT)
    if temperature < 22:
        return _detail(StatusLevel.BAHAYA, Recommendations.SUHU_BAHAYA_COLD)
    return _detail(StatusLevel.BAHAYA, Recommendations.SUHU_BAHAYA_HOT)


def get_status_ammonia(ammonia: float) -> StatusDetail:
    """Classify an ammonia concentration in ppm."""
    if math.isnan(ammonia) or ammonia < 0:
        return _invalid()
    if ammonia <= 0.2:
        return _detail(StatusLevel.AMAN, Recommendations.AMONIA_AMAN)
    if ammonia <= 0.5:
        return _detail(StatusLevel.WASPADA, Recommendations.AMONIA_WASPADA)
    return _detail(StatusLevel.BAHAYA, Recommendations.AMONIA_BAHAYA)


def get_overall_status(
    ph_status: StatusLevel | str,
    temperature_status: StatusLevel | str,
    ammonia_status: StatusLevel | str,
) -> StatusLevel:
    """Return the most severe of the three statuses (Bahaya > Waspada > Aman)."""
    statuses = [StatusLevel(s) for s in (ph_status, temperature_status, ammonia_status)]
    return max(statuses, key=lambda s: s.severity)


def get_overall_status_display(status: StatusLevel | str) -> StatusDisplay:
    status = StatusLevel(status)
    return StatusDisplay(emoji=_EMOJI_BY_STATUS[status], class_name=_CLASS_BY_STATUS[status])


def evaluate(ph_level: float, temperature: float, ammonia: float) -> ReadingEvaluation:
    """Evaluate all three parameters of one reading."""
    ph = get_status_ph(ph_level)
    temp = get_status_temperature(temperature)
    amm = get_status_ammonia(ammonia)
    overall = get_overall_status(ph.status, temp.status, amm.status)
    return ReadingEvaluation(
        ph=ph,
        temperature=temp,
        ammonia=amm,
        overall=overall,
        display=get_overall_status_display(overall),
    )


def evaluate_reading(reading: Any) -> ReadingEvaluation:
    """Evaluate any object exposing ``ph_level``, ``temperature`` and ``ammonia``."""
    return evaluate(reading.ph_level, reading.temperature, reading.ammonia)
