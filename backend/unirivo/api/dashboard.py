from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from unirivo.auth import get_current_user
from unirivo.config import settings
from unirivo.database import get_db
from unirivo.models.application import STATUS_ACCEPTED, STATUS_PENDING, Application
from unirivo.models.project import PROJECT_COMPLETED, PROJECT_OPEN, Project
from unirivo.models.user import User
from unirivo.schemas.matching import (
    DashboardStatsOut,
    DemandedSkillOut,
    RecommendationOut,
    RecommendationsResponse,
    SkillBreakdownOut,
    SkillGapOut,
    SkillsAnalyticsOut,
)
from unirivo.schemas.project import RoleOut
from unirivo.services.profiles import build_match_context, load_project_snapshots
from unirivo.services.skill_matching import ProjectRecommendation, analyze_skills, recommend_projects


router = APIRouter()


def _recommendation_out(item: ProjectRecommendation) -> RecommendationOut:
    project = item.project
    return RecommendationOut(
        id=str(project.id),
        title=project.title,
        description=project.description,
        owner_id=str(project.owner_id),
        roles=[
            RoleOut(
                id=role.role_id,
                role_name=role.role_name,
                mandatory_skills=role.mandatory_skills,
                optional_skills=role.optional_skills,
                needed=role.needed,
                filled=role.filled,
            )
            for role in project.roles
        ],
        match_score=item.match_score,
    )


@router.get("/recommendations", response_model=RecommendationsResponse)
def recommendations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationsResponse:
    context = build_match_context(db, current_user)
    logger.info("Fetching recommendations for user {} ({} skills)", context.user_id, len(context.skills))
    if not context.skills:
        logger.info("No skills on record for user {}, falling back to open projects", context.user_id)

    projects = load_project_snapshots(db, status=PROJECT_OPEN)
    ranked = recommend_projects(context, projects, limit=settings.max_recommendations)
    logger.info("Returning {} recommendations for user {}", len(ranked), context.user_id)
    return RecommendationsResponse(recommendations=[_recommendation_out(item) for item in ranked])


@router.get("/skills-analytics", response_model=SkillsAnalyticsOut)
def skills_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SkillsAnalyticsOut:
    context = build_match_context(db, current_user)
    analytics = analyze_skills(
        context.skills,
        load_project_snapshots(db, status=PROJECT_OPEN),
        top_demanded=settings.top_demanded_skills,
        recommended=settings.recommended_skills,
    )
    return SkillsAnalyticsOut(
        user_skills=analytics.user_skills,
        coverage_percentage=analytics.coverage_percentage,
        top_demanded_skills=[
            DemandedSkillOut(skill=item.skill, demand=item.demand, user_has=item.user_has)
            for item in analytics.top_demanded_skills
        ],
        recommended_skills=[SkillGapOut(skill=item.skill, demand=item.demand) for item in analytics.recommended_skills],
        user_skill_breakdown=[
            SkillBreakdownOut(skill=item.skill, project_matches=item.project_matches)
            for item in analytics.user_skill_breakdown
        ],
        total_open_projects=analytics.total_open_projects,
        matching_projects=analytics.matching_projects,
    )


@router.get("/stats", response_model=DashboardStatsOut)
def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DashboardStatsOut:
    accepted = select(Application.project_id).where(
        Application.user_id == current_user.id,
        Application.status == STATUS_ACCEPTED,
    )
    owned = db.query(Project).filter(Project.owner_id == current_user.id).all()
    participating = db.query(Project).filter(Project.id.in_(accepted), Project.owner_id != current_user.id).all()
    projects = owned + participating

    pending = (
        db.query(Application)
        .filter(Application.user_id == current_user.id, Application.status == STATUS_PENDING)
        .count()
    )
    return DashboardStatsOut(
        total_projects=len(projects),
        active_projects=sum(1 for project in projects if project.status == PROJECT_OPEN),
        completed_projects=sum(1 for project in projects if project.status == PROJECT_COMPLETED),
        pending_applications=pending,
        owned_projects_count=len(owned),
        participating_projects_count=len(participating),
    )
