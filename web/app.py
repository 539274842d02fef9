"""
Character Language Model Web API

A Flask application for training character-level models and exploring
their predictions, including a prediction tree over next characters.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from flask import Flask, jsonify, request

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from charlm import LanguageModel, ModelConfig
from charlm.corpus import CharStream, get_brown_categories, load_brown_text, preprocess_text


logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global state
model: Optional[LanguageModel] = None
training_status: Dict = {
    'is_training': False,
    'progress': 0,
    'total': 100,
    'stage': 'idle',
    'message': '',
    'error': None,
    'stats': None
}
training_lock = threading.Lock()
model_lock = threading.Lock()


@dataclass
class TreeNode:
    """Represents a node in the prediction tree."""
    char: str
    probability: float
    count: int = 0
    children: List['TreeNode'] = None

    def to_dict(self):
        result = {
            'name': self.char,
            'probability': self.probability,
            'count': self.count
        }
        if self.children:
            result['children'] = [c.to_dict() for c in self.children]
        return result


def build_prediction_tree(lm: LanguageModel, window: str,
                          depth: int = 3, branching: int = 5) -> TreeNode:
    """
    Build a tree of next-character predictions starting from a window.

    Args:
        lm: Trained language model
        window: Starting context window
        depth: How many levels deep to go
        branching: How many children per node

    Returns:
        Root TreeNode
    """
    def build_node(ctx: str, current_depth: int) -> Optional[List[TreeNode]]:
        if current_depth >= depth:
            return None

        table = lm.contexts.get(ctx)
        if table is None:
            return None

        children = []
        for char, prob in lm.get_next_char_distribution(ctx, top_k=branching):
            entry = table.get(table.index_of(char))
            node = TreeNode(
                char=char,
                probability=prob,
                count=entry.count,
                children=build_node(ctx[1:] + char, current_depth + 1)
            )
            children.append(node)

        return children or None

    table = lm.contexts.get(window)
    return TreeNode(
        char=window,
        probability=1.0,
        count=table.total_count() if table is not None else 0,
        children=build_node(window, 0)
    )


def _set_status(**updates) -> None:
    with training_lock:
        training_status.update(updates)


def train_model_async(config: ModelConfig, text: Optional[str] = None,
                      categories: Optional[List[str]] = None):
    """Train a model from text (or the Brown corpus) and publish it."""
    global model

    try:
        _set_status(is_training=True, progress=0, stage='loading',
                    message='Loading corpus...', error=None, stats=None)

        if text is None:
            text, _ = load_brown_text(categories=categories, lowercase=config.lowercase)
        else:
            text = preprocess_text(text, lowercase=config.lowercase)

        _set_status(stage='loaded', progress=10,
                    message=f'Loaded {len(text):,} characters')

        new_model = LanguageModel(config.window_length, seed=config.seed)

        def progress_callback(current, total, stage=""):
            # Map progress to 10-95 range
            progress = 10 + int((current / max(total or 1, 1)) * 85)
            _set_status(progress=progress, stage=stage,
                        message=f'{stage}: {current:,}/{total or 0:,}')

        _set_status(stage='training', message='Training model...')
        stats = new_model.train(CharStream(text), progress_callback=progress_callback)

        with model_lock:
            model = new_model

        _set_status(progress=100, stage='complete', message='Training complete!',
                    stats=stats, is_training=False)

    except Exception as e:
        logger.exception("Training failed")
        _set_status(error=str(e), is_training=False, stage='error',
                    message=f'Error: {e}')


def _no_model():
    return jsonify({'error': 'No model trained'}), 400


@app.route('/api/categories')
def api_categories():
    """List the Brown corpus categories available for training."""
    return jsonify(get_brown_categories())


@app.route('/api/train', methods=['POST'])
def api_train():
    """Start model training."""
    with training_lock:
        if training_status['is_training']:
            return jsonify({'error': 'Training already in progress'}), 400

    data = request.get_json(silent=True) or {}
    try:
        config = ModelConfig.from_dict({
            'window_length': int(data.get('window_length', ModelConfig.window_length)),
            'seed': int(data['seed']) if data.get('seed') is not None else None,
            'lowercase': bool(data.get('lowercase', False))
        }).validate()
    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400

    text = data.get('text')
    categories = data.get('categories')
    if not text and not categories:
        return jsonify({'error': 'Provide training text or Brown corpus categories'}), 400
    if text and len(text) < config.window_length:
        return jsonify({'error': f'Text must have at least {config.window_length} characters'}), 400

    # Start training in background
    _set_status(is_training=True, stage='queued', message='Training queued')
    thread = threading.Thread(
        target=train_model_async,
        args=(config, text or None, categories)
    )
    thread.daemon = True
    thread.start()

    return jsonify({'message': 'Training started'})


@app.route('/api/status')
def api_status():
    """Get training status."""
    with training_lock:
        return jsonify(training_status)


@app.route('/api/model/info')
def api_model_info():
    """Get model information."""
    if model is None:
        return _no_model()

    return jsonify({
        'is_trained': model.is_trained,
        'window_length': model.window_length,
        'seed': model.seed,
        'num_contexts': len(model.contexts),
        'stats': model.training_stats
    })


@app.route('/api/model/contexts')
def api_model_contexts():
    """Get the debug representation of the model's contexts."""
    if model is None:
        return _no_model()

    limit = request.args.get('limit', 100, type=int)
    items = list(model.contexts.items())[:max(limit, 0)]

    return jsonify({
        'total': len(model.contexts),
        'contexts': [
            {'window': window, 'entries': str(table)}
            for window, table in items
        ]
    })


@app.route('/api/predict')
def api_predict():
    """Get next-character predictions for the last window of a context."""
    if model is None:
        return _no_model()

    context = request.args.get('context', '')
    k = request.args.get('k', 10, type=int)

    if len(context) < model.window_length:
        return jsonify({'error': f'Context must have at least {model.window_length} characters'}), 400

    window = context[-model.window_length:]
    predictions = model.get_next_char_distribution(window, top_k=k)

    return jsonify({
        'window': window,
        'predictions': [
            {'char': char, 'probability': prob}
            for char, prob in predictions
        ]
    })


@app.route('/api/tree')
def api_tree():
    """Get prediction tree for visualization."""
    if model is None:
        return _no_model()

    context = request.args.get('context', '')
    depth = request.args.get('depth', 3, type=int)
    branching = request.args.get('branching', 5, type=int)

    if len(context) < model.window_length:
        return jsonify({'error': f'Context must have at least {model.window_length} characters'}), 400

    # Limit depth and branching for performance
    depth = min(depth, 5)
    branching = min(branching, 10)

    tree = build_prediction_tree(model, context[-model.window_length:], depth, branching)

    return jsonify(tree.to_dict())


@app.route('/api/generate', methods=['POST'])
def api_generate():
    """Generate text from the model."""
    if model is None:
        return _no_model()

    data = request.get_json(silent=True) or {}
    initial_text = data.get('initial_text')
    if not isinstance(initial_text, str):
        return jsonify({'error': 'initial_text is required'}), 400

    try:
        text_length = int(data.get('text_length', ModelConfig.text_length))
    except (TypeError, ValueError):
        return jsonify({'error': 'text_length must be an integer'}), 400
    text_length = max(0, min(text_length, ModelConfig.max_text_length))

    # the model's random generator is not thread-safe
    with model_lock:
        text = model.generate(initial_text, text_length)

    return jsonify({
        'initial_text': initial_text,
        'text': text
    })


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Character Language Model Web API')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--port', type=int, default=5000, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')

    args = parser.parse_args()

    print("\nStarting Character Language Model API")
    print(f"   Open http://{args.host}:{args.port}/api/status in your browser\n")

    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
