"""Source templates for the files of a per-job Remotion project."""

from ..scenes.models import SceneDefinition

COMPONENT_FILE = "Component.jsx"
ROOT_FILE = "Root.jsx"
ENTRY_FILE = "index.jsx"

ENTRY_JSX = """import { registerRoot } from 'remotion';
import { Root } from './Root';

registerRoot(Root);
"""


def build_root_jsx(scene: SceneDefinition) -> str:
    """Composition descriptor registering ``scene`` under its composition id."""
    return f"""import {{ Composition }} from 'remotion';
import {{ {scene.component_name} }} from './Component';

export const Root = () => {{
  return (
    <Composition
      id="{scene.composition_id}"
      component={{{scene.component_name}}}
      durationInFrames={{{scene.duration_in_frames}}}
      fps={{{scene.fps}}}
      width={{{scene.width}}}
      height={{{scene.height}}}
    />
  );
}};
"""
