# mips_codec/app.py
import os
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from mips_codec.mips_assembler import MipsAssembler
from mips_codec.mips_disassembler import MipsDisassembler

#logging.basicConfig(level=logging.DEBUG) # Use DEBUG for development
logger = logging.getLogger(__name__)

# Frontend origin(s) allowed on /api/*, comma separated
CORS_ORIGINS = [origin.strip() for origin in os.environ.get("MIPS_CODEC_CORS_ORIGINS", "http://localhost:3000").split(",") if origin.strip()]
DEFAULT_PORT = 5001

# Instantiate services
assembler = MipsAssembler()
disassembler = MipsDisassembler()

app = Flask(__name__)
CORS(app, resources={r"/api/*": {"origins": CORS_ORIGINS}})


@app.route('/')
def index():
    return "MIPS Codec Backend is running!"


@app.route('/api/ping', methods=['GET'])
def ping():
    logger.debug("Ping endpoint called")
    return jsonify({"message": "pong"})


@app.route('/api/assemble', methods=['POST'])
def handle_assemble():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get('assembly'), str):
            return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400
        assembly_code = data['assembly']
        logger.debug(f"Received assembly: {assembly_code[:100]}...")
        result = assembler.assemble(assembly_code)
        if result['errors']:
            logger.warning(f"Assembly failed: {result['errors']}")
        else:
            logger.debug(f"Assembly successful. Code length: {len(result['machine_code'])}")
        return jsonify({"machine_code": result["machine_code"], "errors": result["errors"]})
    except Exception as e:
        logger.error(f"Error during assembly: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during assembly: {e}"}]}), 500


@app.route('/api/disassemble', methods=['POST'])
def handle_disassemble():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get('machine_code'), list):
            return jsonify({"errors": [{"message": "Missing/invalid 'machine_code' key (must be list of hex strings)."}]}), 400
        machine_code_lines = data['machine_code']
        logger.debug(f"Received machine code for disassembly: {machine_code_lines[:5]}") # Log first few lines
        result = disassembler.disassemble_hex(machine_code_lines)
        logger.debug(f"Disassembly result: {result['assembly_code'][:100]}...")
        return jsonify({"assembly_code": result["assembly_code"], "errors": result["errors"]})
    except Exception as e:
        logger.error(f"Error during disassembly: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during disassembly: {e}"}]}), 500


if __name__ == '__main__':
    # Or: FLASK_APP=mips_codec.app python -m flask run --port 5001
    app.run(debug=False, port=DEFAULT_PORT)
