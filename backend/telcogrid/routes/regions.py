from flask import Blueprint, jsonify, request

from telcogrid.auth import get_storage, session_required
from telcogrid.pagination import parse_int
from telcogrid.routes import validated_body
from telcogrid.schemas import DistrictCreate, IslandCreate, ProvinceCreate, RegencyCreate, VillageCreate

regions_bp = Blueprint('regions_bp', __name__)


@regions_bp.route('/islands', methods=['GET'])
@session_required()
def list_islands():
    return jsonify([island.to_dict() for island in get_storage().list_islands()]), 200


@regions_bp.route('/islands', methods=['POST'])
@session_required()
def create_island():
    island = get_storage().create_island(validated_body(IslandCreate))
    return jsonify(island.to_dict()), 201


@regions_bp.route('/provinces', methods=['GET'])
@session_required()
def list_provinces():
    island_id = parse_int(request.args.get('islandId'))
    provinces = get_storage().list_provinces(island_id=island_id)
    return jsonify([province.to_dict() for province in provinces]), 200


@regions_bp.route('/provinces', methods=['POST'])
@session_required()
def create_province():
    province = get_storage().create_province(validated_body(ProvinceCreate))
    return jsonify(province.to_dict()), 201


@regions_bp.route('/regencies', methods=['POST'])
@session_required()
def create_regency():
    regency = get_storage().create_regency(validated_body(RegencyCreate))
    return jsonify(regency.to_dict()), 201


@regions_bp.route('/districts', methods=['POST'])
@session_required()
def create_district():
    district = get_storage().create_district(validated_body(DistrictCreate))
    return jsonify(district.to_dict()), 201


@regions_bp.route('/villages', methods=['POST'])
@session_required()
def create_village():
    village = get_storage().create_village(validated_body(VillageCreate))
    return jsonify(village.to_dict()), 201
