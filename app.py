"""Flask web application for the Electrical Wiring Schema Generator."""

import json
import logging
from io import BytesIO

from flask import Flask, request, send_file, jsonify
from werkzeug.utils import secure_filename

from schema_elec.drawing import SchemaGenerator, NoValidCardsError, TemplateError
from schema_elec.engine import MalformedInputError, CapacityExceededError
from schema_elec.parsers import parse_point_records_json, PointListParseError

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.json.sort_keys = False  # keep the preferred brand first

# Configuration
ALLOWED_TEMPLATE_EXTENSIONS = {'drawio'}

app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024  # 50MB max, draw.io templates embed images
app.config['SCHEMA_GENERATOR'] = None


def allowed_template(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_TEMPLATE_EXTENSIONS


def get_generator() -> SchemaGenerator:
    """Get the application's schema generator, created on first use."""
    generator = app.config.get('SCHEMA_GENERATOR')
    if generator is None:
        generator = SchemaGenerator()
        app.config['SCHEMA_GENERATOR'] = generator
    return generator


def _uploaded_file(*field_names):
    for name in field_names:
        file = request.files.get(name)
        if file is not None and file.filename != '':
            return file
    return None


@app.route('/')
def index():
    """List the available endpoints."""
    return jsonify({
        'message': 'Electrical Wiring Schema Generator',
        'endpoints': [
            'GET /cards - Available cards grouped by brand and category',
            'GET /template-info - Current draw.io template information',
            'POST /template - Replace the draw.io template',
            'POST /generate - Generate a .drawio wiring schema',
        ]
    })


@app.route('/cards')
def list_cards():
    """Available cards grouped by brand then category, preferred brand first."""
    catalog = get_generator().catalog
    grouped = {}
    for brand, categories in catalog.group_by_brand().items():
        grouped[brand] = {
            category: [
                {
                    'ref': spec.id,
                    'name': spec.display_name,
                    'brand': spec.brand,
                    'category': spec.category.value,
                    **{f'nb_{key.lower()}': value for key, value in spec.capacity.to_dict().items()},
                    'gui_order': spec.gui_order,
                }
                for spec in specs
            ]
            for category, specs in categories.items()
        }
    logger.info("GET /cards - %d cards in %d brands", len(catalog), len(grouped))
    return jsonify(grouped)


@app.route('/template-info')
def template_info():
    """Information about the current template."""
    info = get_generator().templates.info()
    if info is None:
        return jsonify({'error': 'Draw.io template not found'}), 404
    return jsonify(info.to_dict())


@app.route('/template', methods=['POST'])
def upload_template():
    """Replace the draw.io template."""
    file = _uploaded_file('template', 'modele')
    if file is None:
        return jsonify({'error': 'No template file provided'}), 400

    if not allowed_template(file.filename):
        return jsonify({'error': 'Template must be a .drawio file'}), 400

    try:
        info = get_generator().templates.replace(file.read())
    except TemplateError as e:
        return jsonify({'error': 'Invalid template', 'details': str(e)}), 400

    logger.info("Template replaced by upload %s", secure_filename(file.filename))
    return jsonify({
        'message': 'Template updated',
        **info.to_dict()
    })


@app.route('/generate', methods=['POST'])
def generate_schema():
    """Generate a wiring schema from an uploaded point list."""
    file = _uploaded_file('points', 'fichierJson')
    if file is None:
        return jsonify({'error': 'Missing JSON point list'}), 400

    try:
        records = parse_point_records_json(file.read())
    except PointListParseError as e:
        return jsonify({'error': 'Invalid JSON point list', 'details': str(e)}), 400

    try:
        refs = json.loads(request.form.get('refs') or '[]')
        params = json.loads(request.form.get('params') or '{}')
    except json.JSONDecodeError as e:
        return jsonify({'error': 'Invalid parameters', 'details': str(e)}), 400

    if not isinstance(refs, list) or not isinstance(params, dict):
        return jsonify({
            'error': 'Invalid parameters',
            'details': 'refs must be a JSON array and params a JSON object'
        }), 400

    generator = get_generator()
    try:
        result = generator.generate(records, [str(ref) for ref in refs], params)
    except MalformedInputError as e:
        return jsonify({'error': 'Malformed point list', 'details': str(e)}), 400
    except NoValidCardsError as e:
        return jsonify({
            'error': 'No valid card found',
            'details': str(e)
        }), 400
    except CapacityExceededError as e:
        return jsonify({
            'error': 'Insufficient capacity',
            'details': str(e),
            **e.to_dict()
        }), 422
    except TemplateError as e:
        logger.error("Template unavailable: %s", e)
        return jsonify({'error': 'Template unavailable', 'details': str(e)}), 500

    logger.info(
        "POST /generate - %d bytes, %d warnings", len(result.document), len(result.warnings)
    )
    return send_file(
        BytesIO(result.document),
        as_attachment=True,
        download_name=generator.config.output_filename,
        mimetype='application/xml'
    )


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    print("=" * 60)
    print("Electrical Wiring Schema Generator")
    print("=" * 60)
    print("\nStarting web server...")
    print("Open your browser and go to: http://localhost:5000")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 60)
    app.run(debug=False, host='0.0.0.0', port=5000)
