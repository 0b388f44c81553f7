"""
Mapping of effect configurations onto media API URL transformation strings.

The transform endpoint receives a JSON object such as::

    {"c": {"crop_mode": "fill", "width": 200}, "sepia": {}, "q": {"level": "auto"}}

and turns it into the comma-joined token list ``c_fill,w_200,e_sepia,q_auto``
that goes into the delivery URL path. Tokens follow the key order of the
input. Unknown effect names and effects missing their required parameters
contribute nothing; ``build_transformation`` never raises.
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional


class Effect(str, Enum):
    """Effect keys understood by the transform endpoint."""

    IMPROVE = 'improve'
    AUTO_BRIGHTNESS = 'auto_brightness'
    AUTO_COLOR = 'auto_color'
    AUTO_CONTRAST = 'auto_contrast'
    SHARPEN = 'sharpen'
    VIBRANCE = 'vibrance'
    UPSCALE = 'upscale'
    ENHANCE = 'enhance'
    CARTOONIFY = 'cartoonify'
    SEPIA = 'sepia'
    VIGNETTE = 'vignette'
    PIXELATE = 'pixelate'
    GRAYSCALE = 'grayscale'
    ART = 'e_art'
    REMOVE_BACKGROUND = 'remove_background'
    SHADOW = 'shadow'
    OPACITY = 'o'
    REPLACE_COLOR = 'e_replace_color'
    VECTORIZE = 'e_vectorize'
    FORMAT = 'f'
    CROP = 'c'
    BRIGHTNESS = 'e_brightness'
    CONTRAST = 'e_contrast'
    SATURATION = 'e_saturation'
    BLUR = 'e_blur'
    PIXELATE_STRENGTH = 'e_pixelate'
    BLUR_FACES = 'e_blur_faces'
    PIXELATE_FACES = 'e_pixelate_faces'
    QUALITY = 'q'
    DPR = 'dpr'

    @classmethod
    def lookup(cls, key: Any) -> Optional['Effect']:
        """Return the Effect for key, or None for anything unrecognised."""
        if not isinstance(key, str):
            return None
        try:
            return cls(key)
        except ValueError:
            return None


def _is_defined(params: Mapping[str, Any], field: str) -> bool:
    """A field is defined when present with a non-null value; 0 and "0" count."""
    return params.get(field) is not None


def _is_present(params: Mapping[str, Any], field: str) -> bool:
    """Defined and not an empty string, numeric zero, or False."""
    if not _is_defined(params, field):
        return False
    value = params[field]
    if value is False or value == '':
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return False
    return True


def format_value(value: Any) -> str:
    """Render a parameter value for a URL token."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ','.join('' if item is None else format_value(item) for item in value)
    return str(value)


# (Effect, params) -> token or None
TokenBuilder = Callable[[Effect, Mapping[str, Any]], Optional[str]]


def _plain_effect(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
    return f"e_{effect.value}"


def _fixed(token: str) -> TokenBuilder:
    def build(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
        return token
    return build


def _art(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
    if _is_present(params, 'filter'):
        return f"e_art:{format_value(params['filter'])}"
    return None


def _prefixed_field(prefix: str, field: str) -> TokenBuilder:
    """Token ``<prefix><value>`` emitted whenever field is defined."""
    def build(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
        if _is_defined(params, field):
            return f"{prefix}{format_value(params[field])}"
        return None
    return build


def _replace_color(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
    if not (_is_present(params, 'to_color') and _is_present(params, 'from_color')):
        return None
    segments = ['e_replace_color', format_value(params['to_color'])]
    if _is_present(params, 'tolerance'):
        segments.append(format_value(params['tolerance']))
    segments.append(format_value(params['from_color']))
    return ':'.join(segments)


def _format(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
    if _is_present(params, 'format'):
        return f"f_{format_value(params['format'])}"
    return None


def _crop(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
    if not _is_present(params, 'crop_mode'):
        return None
    parts = [f"c_{format_value(params['crop_mode'])}"]
    for field, prefix in (('width', 'w_'), ('height', 'h_'), ('gravity', 'g_')):
        if _is_present(params, field):
            parts.append(f"{prefix}{format_value(params[field])}")
    return ','.join(parts)


def _adjustment(field: str) -> TokenBuilder:
    """``e_<name>:<value>`` for the slider style effects (e_brightness -> brightness)."""
    def build(effect: Effect, params: Mapping[str, Any]) -> Optional[str]:
        if _is_defined(params, field):
            name = effect.value[len('e_'):]
            return f"e_{name}:{format_value(params[field])}"
        return None
    return build


_DISPATCH: Dict[Effect, TokenBuilder] = {
    Effect.IMPROVE: _plain_effect,
    Effect.AUTO_BRIGHTNESS: _plain_effect,
    Effect.AUTO_COLOR: _plain_effect,
    Effect.AUTO_CONTRAST: _plain_effect,
    Effect.SHARPEN: _plain_effect,
    Effect.VIBRANCE: _plain_effect,
    Effect.UPSCALE: _plain_effect,
    Effect.ENHANCE: _plain_effect,
    Effect.CARTOONIFY: _plain_effect,
    Effect.SEPIA: _plain_effect,
    Effect.VIGNETTE: _plain_effect,
    Effect.PIXELATE: _plain_effect,
    Effect.GRAYSCALE: _plain_effect,
    Effect.ART: _art,
    Effect.REMOVE_BACKGROUND: _fixed('e_background_removal'),
    Effect.SHADOW: _fixed('e_shadow'),
    Effect.OPACITY: _prefixed_field('o_', 'level'),
    Effect.REPLACE_COLOR: _replace_color,
    Effect.VECTORIZE: _fixed('e_vectorize'),
    Effect.FORMAT: _format,
    Effect.CROP: _crop,
    Effect.BRIGHTNESS: _adjustment('level'),
    Effect.CONTRAST: _adjustment('level'),
    Effect.SATURATION: _adjustment('level'),
    Effect.BLUR: _adjustment('strength'),
    Effect.PIXELATE_STRENGTH: _adjustment('strength'),
    Effect.BLUR_FACES: _fixed('e_blur_faces'),
    Effect.PIXELATE_FACES: _fixed('e_pixelate_faces'),
    Effect.QUALITY: _prefixed_field('q_', 'level'),
    Effect.DPR: _prefixed_field('dpr_', 'value'),
}


def build_tokens(effect_config: Any) -> List[str]:
    """
    Map an effect configuration to its ordered list of transformation tokens.

    Args:
        effect_config: Mapping of effect key to parameter mapping

    Returns:
        List of tokens in the iteration order of effect_config
    """
    if not isinstance(effect_config, Mapping):
        return []

    tokens = []
    for key, params in effect_config.items():
        effect = Effect.lookup(key)
        if effect is None:
            continue
        if not isinstance(params, Mapping):
            params = {}
        token = _DISPATCH[effect](effect, params)
        if token:
            tokens.append(token)
    return tokens


def build_transformation(effect_config: Any) -> str:
    """Return the comma-joined transformation string for effect_config ('' if none)."""
    return ','.join(build_tokens(effect_config))


def build_delivery_url(
    delivery_base: str,
    cloud_name: str,
    public_id: str,
    transformation: str = ''
) -> str:
    """
    Assemble the delivery URL for a stored image.

    The transformation segment is dropped entirely when empty so the URL
    never contains an empty path component.
    """
    segments = [delivery_base.rstrip('/'), cloud_name, 'image', 'upload']
    if transformation:
        segments.append(transformation)
    segments.append(public_id)
    return '/'.join(segments)
